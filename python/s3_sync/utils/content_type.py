"""Content-Type の判定

拡張子から判定できない場合は先頭 512 バイトのシグネチャで推定する。
"""
import mimetypes
import os
from typing import BinaryIO, List, Tuple

SNIFF_LENGTH = 512

TEXT_PLAIN = "text/plain; charset=utf-8"
OCTET_STREAM = "application/octet-stream"

# 先頭の空白を読み飛ばしてから比較するマークアップ
_HTML_TAGS: List[bytes] = [
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
]

_EXACT_SIGNATURES: List[Tuple[bytes, str]] = [
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", TEXT_PLAIN),
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"OggS\x00", "application/ogg"),
    (b"MThd\x00\x00\x00\x06", "audio/midi"),
    (b"ID3", "audio/mpeg"),
    (b"\x1a\x45\xdf\xa3", "video/webm"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
    (b"OTTO", "font/otf"),
    (b"\x00\x01\x00\x00", "font/ttf"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
]

# RIFF コンテナ: 8バイト目以降のフォーム種別で判定
_RIFF_FORMS: List[Tuple[bytes, str]] = [
    (b"WEBPVP", "image/webp"),
    (b"WAVE", "audio/wave"),
    (b"AVI ", "video/avi"),
]

_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)

# mimetypes はこれらをエンコーディングとして扱うため型を補う
_ENCODING_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}


def detect_content_type(path: str, stream: BinaryIO) -> str:
    """ファイルの Content-Type を判定

    拡張子で判定できればストリームは読まない。読んだ場合の巻き戻しは呼び出し側の責任。
    """
    guessed = content_type_by_extension(os.path.splitext(path)[1].lower())
    if guessed:
        return guessed

    try:
        head = stream.read(SNIFF_LENGTH)
    except OSError:
        return ""
    return sniff_content_type(head or b"")


def content_type_by_extension(ext: str) -> str:
    """拡張子だけで Content-Type を引く（見つからなければ空文字）"""
    if not ext:
        return ""
    if not mimetypes.inited:
        mimetypes.init()

    guessed = mimetypes.types_map.get(ext) or mimetypes.common_types.get(ext)
    if guessed:
        return guessed
    return _ENCODING_TYPES.get(mimetypes.encodings_map.get(ext, ""), "")


def sniff_content_type(data: bytes) -> str:
    """バイト列の先頭から Content-Type を推定"""
    data = data[:SNIFF_LENGTH]

    stripped = data.lstrip(b"\t\n\x0c\r ")
    for tag in _HTML_TAGS:
        if _matches_html_tag(stripped, tag):
            return "text/html; charset=utf-8"
    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"

    for signature, content_type in _EXACT_SIGNATURES:
        if data.startswith(signature):
            return content_type

    if data.startswith(b"RIFF") and len(data) >= 12:
        for form, content_type in _RIFF_FORMS:
            if data[8:8 + len(form)] == form:
                return content_type

    if _is_mp4(data):
        return "video/mp4"

    if any(byte in _BINARY_BYTES for byte in data):
        return OCTET_STREAM
    return TEXT_PLAIN


def _matches_html_tag(data: bytes, tag: bytes) -> bool:
    if len(data) < len(tag) + 1:
        return False
    if data[:len(tag)].upper() != tag:
        return False
    # タグ名の直後は空白か ">" でなければならない
    return data[len(tag)] in b" >"


def _is_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if box_size < 12 or box_size % 4 != 0 or len(data) < box_size:
        return False
    if data[4:8] != b"ftyp":
        return False
    for offset in range(8, box_size, 4):
        if offset == 12:
            # マイナーバージョンは無視
            continue
        if data[offset:offset + 3] == b"mp4":
            return True
    return False
