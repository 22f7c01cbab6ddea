"""S3クライアント管理"""
import boto3
from typing import Any, Dict, Optional
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError
from ..errors import ConfigurationError
from ..models.config import S3Settings, TransferOptions
from ..utils.logger import LoggerManager

DEFAULT_REGION = "us-east-1"


class S3ClientManager:
    """S3クライアントの作成と管理"""

    def __init__(self, settings: S3Settings, options: Optional[TransferOptions] = None):
        self.settings = settings
        self.options = options or TransferOptions()
        self.logger = LoggerManager.get_logger()
        self._client = None

    def get_client(self):
        """S3クライアントを取得（必要に応じて作成）"""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """S3クライアントを作成"""
        try:
            if self.settings.profile:
                session = boto3.Session(profile_name=self.settings.profile)
            else:
                session = boto3.Session()

            region = self.settings.region or session.region_name or DEFAULT_REGION
            client_args: Dict[str, Any] = {
                "region_name": region,
                "config": self._create_botocore_config(),
            }

            if self.settings.endpoint:
                client_args["endpoint_url"] = self.settings.endpoint
            if self.settings.skip_tls_verify:
                client_args["verify"] = False

            credentials = self.settings.credentials
            if credentials.is_complete:
                client_args["aws_access_key_id"] = credentials.access_key_id
                client_args["aws_secret_access_key"] = credentials.secret_access_key
                if credentials.session_token:
                    client_args["aws_session_token"] = credentials.session_token
                self.logger.info("S3 client created with static credentials.")
            else:
                self.logger.info("S3 client created with default credentials.")

            return session.client("s3", **client_args)

        except BotoCoreError as e:
            self.logger.error(f"Error creating S3 client: {e}")
            raise ConfigurationError(f"failed to configure AWS SDK: {e}") from e

    def _create_botocore_config(self) -> BotoConfig:
        """タイムアウト・リトライ・アドレス形式の設定"""
        s3_options = {"addressing_style": "path"} if self.settings.force_path_style else {}
        return BotoConfig(
            connect_timeout=self.options.connect_timeout_seconds,
            read_timeout=self.options.timeout_seconds,
            retries={"max_attempts": self.options.max_attempts, "mode": "standard"},
            s3=s3_options or None,
        )
