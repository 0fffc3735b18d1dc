"""
Prominence Structured Logging
Centralized logging configuration using loguru.
"""
import sys
from typing import Optional

from loguru import logger

from prominence.config import config

_configured_level: Optional[str] = None


def configure_logging(level: Optional[str] = None) -> None:
    """
    Replace loguru's default handler with the structured stdout sink.

    Args:
        level: Minimum level to emit, defaults to ``config.LOG_LEVEL``
    """
    global _configured_level

    level = (level or config.LOG_LEVEL).upper()
    logger.remove()
    logger.add(
        sys.stdout,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}",
        level=level,
        serialize=False,
    )
    _configured_level = level


def get_logger():
    """Get the configured loguru logger, configuring it on first use."""
    if _configured_level is None:
        configure_logging()
    return logger
