"""
Loguru sink configuration shared by the CLI and scheduled jobs.
"""
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from config import get_settings


def configure_logging(level: str | None = None, log_file: str | None = None) -> None:
    """
    Replace the default loguru sink with stderr plus an optional file sink.

    Args:
        level: Override for the configured log level
        log_file: Override for the configured log file path
    """
    settings = get_settings()
    level = level or settings.log_level
    log_file = log_file if log_file is not None else settings.log_file

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            rotation="10 MB",
            retention="14 days",
            encoding="utf-8",
        )
