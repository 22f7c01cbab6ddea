"""同期処理（計画→クリーンアップ→アップロード）の実行"""
from typing import List, Optional, Sequence

from ..errors import InvalidInputError
from ..models.config import Config
from ..models.plan import SyncSummary
from ..utils.logger import LoggerManager
from .cancellation import CancelToken
from .planner import build_plans
from .s3_client import S3ClientManager
from .transfer import StreamingUploader
from .transport import ObjectClient, PutUploader, Transport


class SyncRunner:
    """1回分の同期を実行"""

    def __init__(self, config: Config, client: Optional[ObjectClient] = None,
                 uploader: Optional[PutUploader] = None):
        self.config = config
        self.settings = config.s3
        self.logger = LoggerManager.get_logger()
        self._client = client
        self._uploader = uploader

    def run(self, sources: Optional[Sequence[str]] = None,
            token: Optional[CancelToken] = None) -> SyncSummary:
        """同期を実行してサマリーを返す"""
        self.settings.validate()

        paths: List[str] = list(sources) if sources else list(self.settings.sources)
        if not paths:
            raise InvalidInputError(
                "at least one source path is required (provide CLI paths or configure sources)"
            )

        # 計画で失敗した場合は何も削除しない
        plans = build_plans(paths, self.settings.context_path)
        self.logger.info(
            f"Planned {len(plans)} files for s3://{self.settings.bucket}/{self.settings.context_path}"
        )

        transport = self._create_transport()

        removed = 0
        if self.settings.cleanup:
            removed = transport.cleanup(self.settings.context_path, token)
            self.logger.info(
                f"Cleanup completed: deleted={removed} prefix='{self.settings.context_path}'"
            )

        results = transport.upload(plans, token)
        self.logger.info(f"Upload completed: {len(results)} objects uploaded")

        return SyncSummary(
            bucket=self.settings.bucket,
            region=self.settings.region,
            context_path=self.settings.context_path,
            cleanup_enabled=self.settings.cleanup,
            objects_removed=removed,
            objects_uploaded=results,
        )

    def _create_transport(self) -> Transport:
        client = self._client
        if client is None:
            client = S3ClientManager(self.settings, self.config.transfer).get_client()

        uploader = self._uploader or StreamingUploader(client, self.config.transfer)
        return Transport(client, uploader, self.settings.bucket, self.settings.overwrite)
