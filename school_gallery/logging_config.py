"""Logging configuration.

Usage:
    from school_gallery.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Album created: %s", album_id)
"""
import logging
import sys
from datetime import datetime, timezone

from . import config


class ConsoleFormatter(logging.Formatter):
    """Human-readable single-line formatter."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        base = (
            f"{record.levelname:<8} "
            f"{timestamp.strftime('%Y-%m-%dT%H:%M:%S.%fZ')} "
            f"{record.name}: "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


_configured = False


def _convert_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: str | int | None = None) -> None:
    """Configure the package logger with a single stdout handler."""
    global _configured

    resolved = _convert_level(level if level is not None else config.LOG_LEVEL)

    logger = logging.getLogger("school_gallery")
    logger.setLevel(resolved)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(ConsoleFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace, configuring on first use."""
    if not _configured:
        configure_logging()
    return logging.getLogger(name)
