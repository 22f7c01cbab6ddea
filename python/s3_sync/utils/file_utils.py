"""ファイル操作とオブジェクトキー関連のユーティリティ"""
import os
from typing import Generator, Optional
from dataclasses import dataclass

from ..errors import SyncIOError


def normalize_prefix(prefix: Optional[str]) -> str:
    """前後の空白と "/" を取り除いたプレフィックスを返す"""
    return (prefix or "").strip().strip("/")


def join_key(prefix: str, relative_path: str) -> str:
    """プレフィックスと相対パスからオブジェクトキーを組み立てる"""
    relative_path = (relative_path or "").strip().strip("/")
    if not relative_path:
        return prefix
    if not prefix:
        return relative_path
    return f"{prefix}/{relative_path}"


def to_storage_path(path: str) -> str:
    """OSのパス区切りをストレージ側の "/" に変換"""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        path = path.replace(os.altsep, "/")
    return path


@dataclass(frozen=True)
class FileInfo:
    """ファイル情報"""
    path: str
    size: int
    relative_path: str


class FileScanner:
    """ディレクトリを決定的な順序で走査する"""

    def scan_directory(self, directory: str) -> Generator[FileInfo, None, None]:
        """ディレクトリ配下の全ファイルを深さ優先・名前順で生成

        ディレクトリ自体は生成しない。読めないエントリがあれば SyncIOError。
        """
        root = os.path.normpath(directory)
        yield from self._walk(root, root)

    def _walk(self, root: str, current: str) -> Generator[FileInfo, None, None]:
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise SyncIOError(
                f"failed to traverse {current}: {e}", {"path": current}
            ) from e

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    yield from self._walk(root, entry.path)
                    continue
                if entry.is_symlink() and os.path.isdir(entry.path):
                    # リンク先のディレクトリには降りない
                    continue
                size = entry.stat().st_size
            except OSError as e:
                raise SyncIOError(
                    f"failed to inspect {entry.path}: {e}", {"path": entry.path}
                ) from e

            yield FileInfo(
                path=entry.path,
                size=size,
                relative_path=os.path.relpath(entry.path, root)
            )
