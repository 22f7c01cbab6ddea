"""設定管理用のデータクラス"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional
import json
import os

from ..errors import ConfigurationError

# プラグイン設定を探すキー（先に見つかったものを使う）
SETTINGS_KEYS = ("s3", "ds-s3", "ds_s3")

_TRUE_VALUES = {"1", "t", "true", "y", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "n", "no", "off", ""}


@dataclass
class LoggingConfig:
    """ロギング設定"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class CredentialsConfig:
    """静的な認証情報"""
    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)


@dataclass
class TransferOptions:
    """転送オプション"""
    multipart_threshold: int = 100 * 1024 * 1024  # 100MB
    multipart_chunksize: int = 10 * 1024 * 1024  # 10MB
    timeout_seconds: int = 300
    connect_timeout_seconds: int = 60
    max_attempts: int = 3

    def __post_init__(self):
        for name in ("multipart_threshold", "multipart_chunksize", "timeout_seconds",
                     "connect_timeout_seconds", "max_attempts"):
            value = _as_int(getattr(self, name), name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
            setattr(self, name, value)


@dataclass
class S3Settings:
    """アップロード先バケットと動作の設定"""
    bucket: str = ""
    region: str = ""
    context_path: str = ""
    sources: List[str] = field(default_factory=list)
    cleanup: bool = False
    overwrite: bool = True
    endpoint: str = ""
    force_path_style: bool = False
    skip_tls_verify: bool = False
    profile: str = ""
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)

    @classmethod
    def from_settings_map(cls, values: Optional[Mapping[str, Any]]) -> 'S3Settings':
        """設定マップを緩い型変換でデコード（未指定はデフォルト値）"""
        settings = cls()
        if values is None:
            return settings
        if not isinstance(values, Mapping):
            raise ConfigurationError(
                f"failed to decode plugin settings: expected a mapping, got {type(values).__name__}"
            )

        settings.bucket = _as_str(values.get("bucket"), "bucket")
        settings.region = _as_str(values.get("region"), "region")
        settings.context_path = _as_str(values.get("context_path"), "context_path").strip("/")
        settings.sources = _as_sources(values.get("sources"))
        settings.endpoint = _as_str(values.get("endpoint"), "endpoint")
        settings.profile = _as_str(values.get("profile"), "profile")

        if values.get("cleanup") is not None:
            settings.cleanup = _as_bool(values["cleanup"], "cleanup")
        if values.get("overwrite") is not None:
            settings.overwrite = _as_bool(values["overwrite"], "overwrite")
        if values.get("force_path_style") is not None:
            settings.force_path_style = _as_bool(values["force_path_style"], "force_path_style")

        tls = _as_section(values.get("tls"), "tls")
        if tls.get("skip_verify") is not None:
            settings.skip_tls_verify = _as_bool(tls["skip_verify"], "tls.skip_verify")

        credentials = _as_section(values.get("credentials"), "credentials")
        if credentials:
            settings.credentials = CredentialsConfig(
                access_key_id=_as_str(credentials.get("access_key_id"), "credentials.access_key_id"),
                secret_access_key=_as_str(
                    credentials.get("secret_access_key"), "credentials.secret_access_key"
                ),
                session_token=_as_str(credentials.get("session_token"), "credentials.session_token"),
            )

        return settings

    def validate(self) -> None:
        """必須項目のチェック"""
        if not self.bucket.strip():
            raise ConfigurationError("bucket is required")

        if self.skip_tls_verify and not self.endpoint.strip():
            raise ConfigurationError(
                "tls.skip_verify can only be enabled when a custom endpoint is configured"
            )

    def clone(self) -> 'S3Settings':
        """独立したコピーを返す"""
        return replace(
            self,
            sources=list(self.sources),
            credentials=replace(self.credentials),
        )


@dataclass
class Config:
    """メイン設定クラス"""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    s3: S3Settings = field(default_factory=S3Settings)
    transfer: TransferOptions = field(default_factory=TransferOptions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Config':
        """辞書から設定を構築"""
        if not isinstance(data, Mapping):
            raise ConfigurationError("configuration root must be a JSON object")

        try:
            logging_config = LoggingConfig(**data.get("logging", {}))
            transfer = TransferOptions(**data.get("transfer", {}))
        except TypeError as e:
            raise ConfigurationError(f"Error loading configuration: {e}") from e

        return cls(
            logging=logging_config,
            s3=S3Settings.from_settings_map(resolve_plugin_settings(data)),
            transfer=transfer,
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Error decoding JSON from {config_path}: {e}") from e

        return cls.from_dict(data)


def resolve_plugin_settings(data: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """トップレベル、次に plugins.settings から S3 設定を探す"""
    candidates: List[Mapping[str, Any]] = [data]

    plugins = data.get("plugins")
    if isinstance(plugins, Mapping) and isinstance(plugins.get("settings"), Mapping):
        candidates.append(plugins["settings"])

    for container in candidates:
        for key in SETTINGS_KEYS:
            if key in container:
                return container[key]
    return None


def _as_str(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    raise ConfigurationError(f"failed to decode plugin settings: {name} must be a string")


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigurationError(
        f"failed to decode plugin settings: {name} cannot be parsed as a boolean: {value!r}"
    )


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _as_sources(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError("failed to decode plugin settings: sources must be a list")
    cleaned = [_as_str(item, "sources") for item in value]
    return [item for item in cleaned if item]


def _as_section(value: Any, name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"failed to decode plugin settings: {name} must be a mapping")
    return dict(value)
