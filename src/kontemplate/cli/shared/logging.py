"""loguru sink configuration for the CLI."""

import os
import sys

from loguru import logger

LOG_LEVEL_ENV = "KONTEMPLATE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at the requested level.

    Args:
        level: Log level name; defaults to $KONTEMPLATE_LOG_LEVEL or WARNING
    """
    level = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")
