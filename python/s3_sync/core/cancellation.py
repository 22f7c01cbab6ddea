"""協調的キャンセルと期限"""
import threading
import time
from typing import Any, BinaryIO, Optional

from ..errors import OperationCancelledError


class CancelToken:
    """ネットワーク呼び出しの前と送信中に確認されるキャンセルトークン"""

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self, operation: str = "operation") -> None:
        if self.cancelled:
            raise OperationCancelledError(f"{operation} cancelled")
        if self.expired:
            raise OperationCancelledError(f"{operation} aborted: deadline exceeded")


class CancellableReader:
    """read() のたびにトークンを確認するストリームラッパー

    botocore は本体をチャンク単位で読むため、送信途中でも中断できる。
    """

    def __init__(self, stream: BinaryIO, token: CancelToken, operation: str):
        self._stream = stream
        self._token = token
        self._operation = operation

    def read(self, size: int = -1) -> bytes:
        self._token.raise_if_cancelled(self._operation)
        return self._stream.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._stream.seek(offset, whence)

    def tell(self) -> int:
        return self._stream.tell()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._stream, name)


def check(token: Optional[CancelToken], operation: str) -> None:
    """トークンが無ければ何もしない"""
    if token is not None:
        token.raise_if_cancelled(operation)


def guard_stream(stream: BinaryIO, token: Optional[CancelToken], operation: str) -> BinaryIO:
    """トークンがあれば送信中もキャンセルを確認するストリームを返す"""
    if token is None:
        return stream
    return CancellableReader(stream, token, operation)
