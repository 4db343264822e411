"""Loguru sink setup shared by the CLI"""

import sys

from loguru import logger


LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def configure_logging(level: str = "WARNING") -> None:
    """Replace loguru's default sink with a single stderr sink at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
