"""S3 Sync パッケージ"""
from typing import Optional, Sequence
from .models.config import Config
from .models.plan import FilePlan, UploadResult, SyncSummary
from .utils.logger import LoggerManager
from .core.cancellation import CancelToken
from .core.task_runner import SyncRunner

__version__ = "0.1.0"


class S3Sync:
    """S3同期のメインクラス"""

    def __init__(self, config: Config):
        self.config = config

        # ロガーをセットアップ
        self.logger = LoggerManager.setup(self.config.logging)
        self.logger.info("S3 Sync initialized")

        self.runner = SyncRunner(self.config)

    @classmethod
    def from_file(cls, config_path: str = "config.json") -> 'S3Sync':
        return cls(Config.from_file(config_path))

    def run(self, sources: Optional[Sequence[str]] = None,
            token: Optional[CancelToken] = None) -> SyncSummary:
        """同期を実行"""
        self.logger.info("Starting S3 sync process...")
        return self.runner.run(sources, token)


__all__ = ['S3Sync', 'Config', 'FilePlan', 'UploadResult', 'SyncSummary', 'CancelToken']
