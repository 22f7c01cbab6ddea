"""ロギング設定ユーティリティ"""
import logging
import os
from typing import Optional, List
from ..models.config import LoggingConfig

LOGGER_NAME = "s3_sync"


class LoggerManager:
    """ロガーの設定と管理"""

    _configured: bool = False

    @classmethod
    def setup(cls, config: LoggingConfig) -> logging.Logger:
        """ロガーをセットアップ（2回目以降は設定済みのロガーを返す）"""
        logger = logging.getLogger(LOGGER_NAME)
        if cls._configured:
            return logger

        formatter = logging.Formatter(config.format, datefmt="%Y-%m-%d %H:%M:%S")
        handlers: List[logging.Handler] = []

        # stdoutはサマリーJSON用なのでstderrへ出す
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

        if config.file:
            log_dir = os.path.dirname(config.file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(config.file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        logger.setLevel(cls._resolve_level(config.level))
        logger.handlers = handlers
        logger.propagate = False

        cls._configured = True
        return logger

    @classmethod
    def set_level(cls, level: Optional[str]) -> None:
        """実行時にログレベルを上書き（不明なレベルは無視）"""
        if not level or not level.strip():
            return
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            logging.getLogger(LOGGER_NAME).setLevel(resolved)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """パッケージのロガーを取得"""
        return logging.getLogger(LOGGER_NAME)

    @classmethod
    def reset(cls) -> None:
        """ハンドラーを外して未設定状態に戻す"""
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        cls._configured = False

    @staticmethod
    def _resolve_level(level: str) -> int:
        return getattr(logging, (level or "INFO").upper(), logging.INFO)
