"""
@file_name: log_config.py
@description: loguru sink configuration

Library code logs through ``from loguru import logger`` directly and never
touches sinks. Entry points (the CLI, scripts) call configure_logging() once
to replace loguru's default stderr sink with one at the configured level.
"""

import sys
from typing import Optional

from loguru import logger

from story_store.settings import settings

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: Optional[str] = None) -> int:
    """
    Replace loguru's sinks with a single stderr sink

    Args:
        level: Log level, defaults to settings.log_level

    Returns:
        The loguru handler id of the new sink
    """
    logger.remove()
    return logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
