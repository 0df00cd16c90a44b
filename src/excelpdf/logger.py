from __future__ import annotations

import sys
from typing import Any

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(config: dict[str, Any] | None = None) -> None:
    """Replace loguru's default sink with the configured console and file sinks."""
    logger.remove()

    if config is None:
        logger.add(sys.stderr, level="INFO", format=CONSOLE_FORMAT)
        return

    level = config.get("level", "INFO")
    if config.get("console", True):
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    file_config = config.get("file") or {}
    if file_config.get("enabled", False):
        logger.add(
            file_config.get("path", "logs/excelpdf_{time}.log"),
            rotation=file_config.get("rotation", "10 MB"),
            retention=file_config.get("retention", "10 days"),
            level=level,
            format=FILE_FORMAT,
        )
