#!/usr/bin/env python3
"""ロガーのテスト"""
import logging

from s3_sync.models.config import LoggingConfig
from s3_sync.utils.logger import LOGGER_NAME, LoggerManager


def test_logger_setup(tmp_path):
    log_file = tmp_path / "logs" / "s3_sync.log"
    logger = LoggerManager.setup(LoggingConfig(level="debug", file=str(log_file)))

    logger.debug("debug message")
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "debug message" in log_file.read_text(encoding="utf-8")


def test_setup_is_idempotent():
    first = LoggerManager.setup(LoggingConfig(level="INFO"))
    second = LoggerManager.setup(LoggingConfig(level="ERROR"))

    assert first is second
    assert second.level == logging.INFO
    assert len(second.handlers) == 1


def test_unknown_level_falls_back_to_info():
    logger = LoggerManager.setup(LoggingConfig(level="chatty"))

    assert logger.level == logging.INFO


def test_set_level_override():
    LoggerManager.setup(LoggingConfig(level="INFO"))

    LoggerManager.set_level("warning")
    assert LoggerManager.get_logger().level == logging.WARNING

    LoggerManager.set_level("not-a-level")
    LoggerManager.set_level("")
    assert LoggerManager.get_logger().level == logging.WARNING
