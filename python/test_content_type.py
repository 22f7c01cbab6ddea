#!/usr/bin/env python3
"""Content-Type 判定のテスト"""
import io

import pytest

from s3_sync.utils.content_type import (
    OCTET_STREAM,
    SNIFF_LENGTH,
    TEXT_PLAIN,
    detect_content_type,
    sniff_content_type,
)


class UnreadableStream(io.BytesIO):
    def read(self, *args):
        raise AssertionError("stream must not be read when the extension is known")


def test_known_extension_does_not_read_content():
    assert detect_content_type("notes.txt", UnreadableStream()).startswith("text/plain")


def test_extension_lookup_is_case_insensitive():
    assert detect_content_type("IMAGE.PNG", UnreadableStream()) == "image/png"


def test_unknown_extension_falls_back_to_sniffing():
    stream = io.BytesIO(b"\x89PNG\r\n\x1a\n" + b"\x00" * 1024)

    assert detect_content_type("image.unknownext", stream) == "image/png"
    assert stream.tell() <= SNIFF_LENGTH


def test_no_extension_plain_text():
    assert detect_content_type("LICENSE", io.BytesIO(b"MIT License\n")) == TEXT_PLAIN


def test_read_failure_yields_empty_content_type():
    class BrokenStream(io.BytesIO):
        def read(self, *args):
            raise OSError("boom")

    assert detect_content_type("blob", BrokenStream()) == ""


@pytest.mark.parametrize("data, expected", [
    (b"", TEXT_PLAIN),
    (b"hello world", TEXT_PLAIN),
    (b"\x00\x01\x02\x03", OCTET_STREAM),
    (b"  <!DOCTYPE html><html></html>", "text/html; charset=utf-8"),
    (b"<html>", "text/html; charset=utf-8"),
    (b"<?xml version='1.0'?><a/>", "text/xml; charset=utf-8"),
    (b"%PDF-1.7", "application/pdf"),
    (b"GIF89a....", "image/gif"),
    (b"\xff\xd8\xff\xe0", "image/jpeg"),
    (b"PK\x03\x04rest", "application/zip"),
    (b"\x1f\x8b\x08\x00", "application/x-gzip"),
    (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
    (b"RIFF\x00\x00\x00\x00WAVEfmt ", "audio/wave"),
    (b"\xef\xbb\xbfbom text", TEXT_PLAIN),
    (b"\x00asm\x01\x00\x00\x00", "application/wasm"),
])
def test_sniff_content_type(data, expected):
    assert sniff_content_type(data) == expected


def test_sniff_mp4():
    data = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"
    assert sniff_content_type(data) == "video/mp4"


def test_html_tag_requires_terminator():
    assert sniff_content_type(b"<htmlx") == TEXT_PLAIN


def test_compressed_archive_extension_does_not_read_content():
    content_type = detect_content_type("archive.tar.gz", UnreadableStream())

    assert content_type in {"application/gzip", "application/x-gzip"}


@pytest.mark.parametrize("path", ["backup.bz2", "backup.xz", "BACKUP.GZ"])
def test_compression_extensions_resolve_by_name(path):
    assert detect_content_type(path, UnreadableStream()).startswith("application/")
