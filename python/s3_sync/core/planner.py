"""ローカルパスからアップロード計画を作成"""
import os
import stat
from typing import List, Optional, Sequence, Set

from ..errors import DuplicateKeyError, InvalidInputError, SyncIOError
from ..models.plan import FilePlan
from ..utils.file_utils import FileScanner, join_key, normalize_prefix, to_storage_path


def build_plans(paths: Sequence[str], prefix: Optional[str],
                scanner: Optional[FileScanner] = None) -> List[FilePlan]:
    """ファイル・ディレクトリのパス群を、キーが一意なアップロード計画に変換

    どこかで失敗した場合は計画を一切返さない。
    """
    if not paths:
        raise InvalidInputError("at least one source path must be specified")

    scanner = scanner or FileScanner()
    base_prefix = normalize_prefix(prefix)
    plans: List[FilePlan] = []
    seen: Set[str] = set()

    def add(source: str, relative_path: str, size: int) -> None:
        key = join_key(base_prefix, to_storage_path(relative_path))
        if key in seen:
            raise DuplicateKeyError(key)
        seen.add(key)
        plans.append(FilePlan(source=source, key=key, size=size))

    for candidate in paths:
        path = (candidate or "").strip()
        if not path:
            raise InvalidInputError(
                f"encountered empty source path entry: {candidate!r}", {"path": candidate}
            )

        try:
            info = os.stat(path)
        except OSError as e:
            raise SyncIOError(f"failed to stat {path}: {e}", {"path": path}) from e

        if stat.S_ISDIR(info.st_mode):
            for file_info in scanner.scan_directory(path):
                add(file_info.path, file_info.relative_path, file_info.size)
            continue

        add(path, os.path.basename(os.path.normpath(path)), info.st_size)

    return plans
