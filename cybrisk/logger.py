#!/usr/bin/env python3
"""
CybRisk - Logging System
Provides consistent, namespaced logging across all engine components.
"""

import logging
import threading
from logging.handlers import RotatingFileHandler

from .paths import paths
from .config import config


LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _level(name: str, fallback: int) -> int:
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else fallback


class CybRiskLogger:
    """Centralized logging with optional file rotation."""

    _loggers: dict = {}
    _lock = threading.Lock()

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger for a component."""
        with cls._lock:
            if name in cls._loggers:
                return cls._loggers[name]

            level = _level(config.get('logging.level', 'INFO'), logging.INFO)
            console_level = _level(config.get('logging.console_level', 'WARNING'), logging.WARNING)

            logger = logging.getLogger(f"cybrisk.{name}")
            logger.setLevel(level)
            logger.handlers.clear()

            formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

            console_handler = logging.StreamHandler()
            console_handler.setLevel(console_level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

            # File logging is opt-in; the engine itself writes nothing to disk
            if config.get('logging.file_enabled', False):
                file_handler = RotatingFileHandler(
                    paths.log_file(name),
                    maxBytes=int(config.get('logging.max_bytes', 10 * 1024 * 1024)),
                    backupCount=int(config.get('logging.backup_count', 30)),
                    encoding='utf-8'
                )
                file_handler.setLevel(level)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

            cls._loggers[name] = logger
            return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name."""
    return CybRiskLogger.get_logger(name)
