"""S3 Sync コアモジュール"""
from .cancellation import CancelToken, CancellableReader
from .planner import build_plans
from .s3_client import S3ClientManager
from .transfer import StreamingUploader
from .transport import Transport, ObjectClient, PutUploader
from .task_runner import SyncRunner

__all__ = [
    'CancelToken',
    'CancellableReader',
    'build_plans',
    'S3ClientManager',
    'StreamingUploader',
    'Transport',
    'ObjectClient',
    'PutUploader',
    'SyncRunner'
]
