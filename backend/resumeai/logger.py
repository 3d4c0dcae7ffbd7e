"""
Service logger setup.

Configures loguru once for the API process. Modules log with
``from loguru import logger`` directly; only the entrypoint calls setup_logger().
"""

import os
import sys
from typing import Optional

from loguru import logger

from resumeai.core import ENV, LOG_LEVEL

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(level: Optional[str] = None) -> None:
    """
    Replace loguru's default sink with a single stderr sink.

    Args:
        level: Minimum level to emit; defaults to LOG_LEVEL from the environment.
    """
    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | {name} | <level>{message}</level>",
        level=level or LOG_LEVEL,
        colorize=not os.getenv("NO_COLOR"),
    )

    logger.info(f"Logging configured (env={ENV}, level={level or LOG_LEVEL})")
