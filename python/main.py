#!/usr/bin/env python3
"""S3 Sync - エントリーポイント"""
import sys

from s3_sync.cli import main


if __name__ == "__main__":
    sys.exit(main())
