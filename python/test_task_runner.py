#!/usr/bin/env python3
"""SyncRunner のテスト"""
import json

import pytest

from fakes import FakeObjectClient, RecordingUploader, page
from s3_sync.core.task_runner import SyncRunner
from s3_sync.errors import ConfigurationError, DuplicateKeyError, InvalidInputError
from s3_sync.models.config import Config, S3Settings


def make_config(**settings):
    settings.setdefault("bucket", "bucket")
    return Config(s3=S3Settings(**settings))


def test_run_with_cleanup_produces_summary(tmp_path, write_file):
    write_file("dist/app.js", b"console.log(1)")
    write_file("dist/css/site.css", b"body{}")
    client = FakeObjectClient(pages=[page(["web/old.js"])])
    uploader = RecordingUploader()
    config = make_config(region="eu-west-1", context_path="web", cleanup=True)

    summary = SyncRunner(config, client, uploader).run([str(tmp_path / "dist")])

    assert summary.objects_removed == 1
    assert client.list_calls[0]["Prefix"] == "web/"
    assert uploader.keys == ["web/app.js", "web/css/site.css"]
    assert summary.to_dict() == {
        "bucket": "bucket",
        "region": "eu-west-1",
        "context_path": "web",
        "cleanup_enabled": True,
        "objects_removed": 1,
        "objects_uploaded": [
            {"source": str(tmp_path / "dist" / "app.js"), "key": "web/app.js",
             "size": 14, "etag": '"etag"'},
            {"source": str(tmp_path / "dist" / "css" / "site.css"), "key": "web/css/site.css",
             "size": 6, "etag": '"etag"'},
        ],
    }
    assert json.loads(summary.to_json()) == summary.to_dict()


def test_run_without_cleanup_skips_listing(write_file):
    path = write_file("report.csv")
    client = FakeObjectClient()

    summary = SyncRunner(make_config(), client, RecordingUploader()).run([path])

    assert client.list_calls == []
    assert summary.objects_removed == 0
    assert "region" not in summary.to_dict()
    assert "context_path" not in summary.to_dict()


def test_run_uses_configured_sources(write_file):
    path = write_file("data.txt")
    uploader = RecordingUploader()

    SyncRunner(make_config(sources=[path]), FakeObjectClient(), uploader).run()

    assert uploader.keys == ["data.txt"]


def test_run_requires_sources():
    with pytest.raises(InvalidInputError):
        SyncRunner(make_config(), FakeObjectClient(), RecordingUploader()).run()


def test_run_requires_bucket(write_file):
    with pytest.raises(ConfigurationError):
        SyncRunner(Config(), FakeObjectClient(), RecordingUploader()).run([write_file("a")])


def test_planning_error_prevents_cleanup(write_file):
    path = write_file("data.txt")
    client = FakeObjectClient(pages=[page(["x"])])

    with pytest.raises(DuplicateKeyError):
        SyncRunner(make_config(cleanup=True), client, RecordingUploader()).run([path, path])

    assert client.list_calls == []
    assert client.delete_calls == []
