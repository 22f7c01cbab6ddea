"""S3 Sync の例外階層"""
from typing import Any, Dict, Optional


class SyncError(Exception):
    """s3_sync の全例外の基底クラス"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SyncError):
    """設定が不正な場合"""


class InvalidInputError(SyncError):
    """呼び出し側で修正可能な入力エラー"""


class SyncIOError(SyncError):
    """ファイルシステムまたはストレージ通信の失敗"""

    @property
    def path(self) -> Optional[str]:
        return self.details.get("path")

    @property
    def key(self) -> Optional[str]:
        return self.details.get("key")


class CleanupError(SyncIOError):
    """クリーンアップの失敗（途中までの削除件数を保持）"""

    def __init__(self, message: str, removed: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.removed = removed


class DuplicateKeyError(SyncError):
    """2つの入力が同じオブジェクトキーに解決された"""

    def __init__(self, key: str):
        super().__init__(f"duplicate object key detected: {key}", {"key": key})
        self.key = key


class ObjectExistsError(SyncError):
    """上書き無効時に既存オブジェクトが見つかった"""

    def __init__(self, key: str):
        super().__init__(
            f"object {key} already exists and overwrite is disabled", {"key": key}
        )
        self.key = key


class OperationCancelledError(SyncError):
    """キャンセルまたは期限切れ"""
