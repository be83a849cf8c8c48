"""
Loguru configuration for the service.

Modules log through ``from loguru import logger`` directly; this module only
decides where the records go.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name}:{line} | {message}"


def setup_logger(level: str = "INFO", log_file: Path | None = None) -> None:
    """
    Replace loguru's default sink with a stdout sink at ``level``.

    Args:
        level: Minimum level for console output
        log_file: Optional file that also receives DEBUG and above
    """
    logger.remove()
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=level, colorize=True)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
