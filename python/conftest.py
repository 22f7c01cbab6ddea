"""pytest 共通フィクスチャ"""
import pytest

from s3_sync.utils.logger import LoggerManager


@pytest.fixture(autouse=True)
def reset_logger():
    """テストごとにロガーを未設定状態に戻す"""
    LoggerManager.reset()
    yield
    LoggerManager.reset()


@pytest.fixture
def write_file(tmp_path):
    """tmp_path 配下にファイルを作成するヘルパー"""
    def _write(relative_path: str, content: bytes = b"hello") -> str:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)
    return _write
