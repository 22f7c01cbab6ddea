"""コマンドラインインターフェース"""
import argparse
import os
import sys
from dataclasses import replace
from typing import List, Optional, TextIO

from . import S3Sync, __version__
from .errors import CleanupError, SyncError
from .models.config import Config, S3Settings
from .utils.logger import LoggerManager

DEFAULT_CONFIG_PATH = "config.json"

UPLOAD_USAGE = """\
Usage: s3-sync upload [flags] <path> [path...]

Uploads one or more files/directories to an S3-compatible bucket.

Flags:
  --config <path>            Configuration file (default: ./config.json if present)
  --bucket <name>            Override target bucket (defaults to configuration)
  --region <name>            Override AWS region
  --context <prefix>         Set object prefix/context path
  --cleanup                  Remove existing objects before uploading
  --overwrite                Overwrite conflicting objects (default true)
  --endpoint <url>           Use a custom S3-compatible endpoint
  --force-path-style         Force path-style addressing
  --skip-tls-verify          Disable TLS verification (requires --endpoint)
  --profile <name>           Shared AWS profile to use
  --log-level <level>        Override the configured log level
"""

GENERAL_HELP = """\
Usage: s3-sync <command> [args]
Commands:
  upload   Upload local files or directories to an S3-compatible bucket
  help     Show this help message
  version  Show version information
"""


def build_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(prog="s3-sync", add_help=False)
    subparsers = parser.add_subparsers(dest="command")

    upload = subparsers.add_parser("upload", add_help=False)
    upload.add_argument("-h", "--help", action="store_true", dest="show_help")
    upload.add_argument("--config", default=None)
    upload.add_argument("--bucket", default="")
    upload.add_argument("--region", default="")
    upload.add_argument("--context", default="")
    upload.add_argument("--cleanup", action=argparse.BooleanOptionalAction, default=None)
    upload.add_argument("--overwrite", action=argparse.BooleanOptionalAction, default=None)
    upload.add_argument("--endpoint", default="")
    upload.add_argument("--force-path-style", action=argparse.BooleanOptionalAction, default=None)
    upload.add_argument("--skip-tls-verify", action=argparse.BooleanOptionalAction, default=None)
    upload.add_argument("--profile", default="")
    upload.add_argument("--log-level", default="")
    upload.add_argument("paths", nargs="*")

    subparsers.add_parser("help", add_help=False)
    subparsers.add_parser("version", add_help=False)
    return parser


def load_config(config_path: Optional[str]) -> Config:
    """設定を読み込む（既定パスが無ければデフォルト値）"""
    if config_path:
        return Config.from_file(config_path)
    if os.path.exists(DEFAULT_CONFIG_PATH):
        return Config.from_file(DEFAULT_CONFIG_PATH)
    return Config()


def apply_overrides(settings: S3Settings, args: argparse.Namespace) -> S3Settings:
    """コマンドライン引数で設定を上書き"""
    merged = settings.clone()

    if args.bucket.strip():
        merged.bucket = args.bucket.strip()
    if args.region.strip():
        merged.region = args.region.strip()
    if args.context.strip():
        merged.context_path = args.context.strip().strip("/")
    if args.endpoint.strip():
        merged.endpoint = args.endpoint.strip()
    if args.profile.strip():
        merged.profile = args.profile.strip()
    if args.cleanup is not None:
        merged.cleanup = args.cleanup
    if args.overwrite is not None:
        merged.overwrite = args.overwrite
    if args.force_path_style is not None:
        merged.force_path_style = args.force_path_style
    if args.skip_tls_verify is not None:
        merged.skip_tls_verify = args.skip_tls_verify

    return merged


def run_upload(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """upload コマンド"""
    if args.show_help:
        stdout.write(UPLOAD_USAGE)
        return 0

    try:
        config = load_config(args.config)
        config = replace(config, s3=apply_overrides(config.s3, args))
        config.s3.validate()

        syncer = S3Sync(config)
        LoggerManager.set_level(args.log_level)
        summary = syncer.run(args.paths or None)

    except CleanupError as e:
        stderr.write(f"Error: cleanup failed: {e} (objects removed before failure: {e.removed})\n")
        return 1
    except (SyncError, FileNotFoundError) as e:
        stderr.write(f"Error: {e}\n")
        return 1

    stdout.write(summary.to_json() + "\n")
    return 0


def main(argv: Optional[List[str]] = None, stdout: TextIO = sys.stdout,
         stderr: TextIO = sys.stderr) -> int:
    """エントリーポイント。終了コードを返す"""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    if args.command == "upload":
        return run_upload(args, stdout, stderr)
    if args.command == "version":
        stdout.write(f"s3-sync version {__version__}\n")
        return 0

    stdout.write(GENERAL_HELP)
    return 0
