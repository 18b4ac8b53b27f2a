"""Loguru setup for processes that embed the wallet manager."""

import sys

from loguru import logger

from ensemble_wallet.config import get_settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str | None = None) -> int:
    """Configure loguru logging.

    Args:
        level: Minimum level; defaults to ``ENSEMBLE_LOG_LEVEL``.

    Returns:
        The id of the installed stderr handler.
    """
    level = level or get_settings().log_level
    logger.remove()  # Remove default handler
    return logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper())
