#!/usr/bin/env python3
"""コマンドラインのテスト"""
import io
import json

import pytest

from fakes import FakeObjectClient, RecordingUploader, client_error, page
from s3_sync import __version__, cli
from s3_sync.core import task_runner


@pytest.fixture
def fake_storage(monkeypatch):
    """S3クライアントを作らずにフェイクを使う"""
    client = FakeObjectClient()
    uploader = RecordingUploader()

    def create_transport(self):
        return task_runner.Transport(
            client, uploader, self.settings.bucket, self.settings.overwrite
        )

    monkeypatch.setattr(task_runner.SyncRunner, "_create_transport", create_transport)
    return client, uploader


def run_cli(argv):
    stdout, stderr = io.StringIO(), io.StringIO()
    code = cli.main(argv, stdout=stdout, stderr=stderr)
    return code, stdout.getvalue(), stderr.getvalue()


def test_version():
    code, out, _ = run_cli(["version"])

    assert code == 0
    assert out == f"s3-sync version {__version__}\n"


def test_help():
    code, out, _ = run_cli(["help"])

    assert code == 0
    assert "upload" in out


def test_upload_help():
    code, out, _ = run_cli(["upload", "--help"])

    assert code == 0
    assert out.startswith("Usage: s3-sync upload")


def test_upload_prints_summary(monkeypatch, tmp_path, write_file, fake_storage):
    monkeypatch.chdir(tmp_path)
    path = write_file("build/out.txt")
    _, uploader = fake_storage

    code, out, err = run_cli(["upload", "--bucket", "b", "--context", "/rel/", path])

    assert code == 0, err
    summary = json.loads(out)
    assert summary["bucket"] == "b"
    assert summary["context_path"] == "rel"
    assert summary["cleanup_enabled"] is False
    assert summary["objects_uploaded"][0]["key"] == "rel/out.txt"
    assert uploader.keys == ["rel/out.txt"]


def test_flags_override_config_file(tmp_path, write_file, fake_storage):
    path = write_file("out.txt")
    config_path = tmp_path / "settings.json"
    config_path.write_text(json.dumps({
        "s3": {"bucket": "from-config", "cleanup": True, "overwrite": False, "sources": [path]},
    }), encoding="utf-8")
    client, _ = fake_storage
    client.pages = [page(["a", "b"])]
    client.head_error = client_error("NotFound", 404)

    code, out, err = run_cli(["upload", "--config", str(config_path), "--bucket", "override"])

    assert code == 0, err
    summary = json.loads(out)
    assert summary["bucket"] == "override"
    assert summary["objects_removed"] == 2
    assert client.head_calls == ["out.txt"]


def test_no_overwrite_flag_reports_existing_object(monkeypatch, tmp_path, write_file, fake_storage):
    monkeypatch.chdir(tmp_path)
    path = write_file("out.txt")

    code, out, err = run_cli(["upload", "--bucket", "b", "--no-overwrite", path])

    assert code == 1
    assert out == ""
    assert "already exists" in err


def test_cleanup_failure_reports_removed_count(monkeypatch, tmp_path, write_file, fake_storage):
    monkeypatch.chdir(tmp_path)
    path = write_file("out.txt")
    client, _ = fake_storage
    client.pages = [page(["a"], next_token="t"), page(["b"])]
    client.delete_error = client_error("InternalError", 500, "DeleteObjects")
    client.fail_delete_on_call = 2

    code, _, err = run_cli(["upload", "--bucket", "b", "--cleanup", path])

    assert code == 1
    assert "cleanup failed" in err
    assert "objects removed before failure: 1" in err


def test_missing_bucket(monkeypatch, tmp_path, write_file):
    monkeypatch.chdir(tmp_path)

    code, _, err = run_cli(["upload", write_file("out.txt")])

    assert code == 1
    assert "bucket is required" in err


def test_missing_sources(monkeypatch, tmp_path, fake_storage):
    monkeypatch.chdir(tmp_path)

    code, _, err = run_cli(["upload", "--bucket", "b"])

    assert code == 1
    assert "at least one source path is required" in err


def test_explicit_missing_config_file(tmp_path):
    code, _, err = run_cli(["upload", "--config", str(tmp_path / "nope.json"), "x"])

    assert code == 1
    assert "not found" in err
