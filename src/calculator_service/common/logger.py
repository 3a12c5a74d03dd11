"""Shared logger for the calculator service."""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("calculator_service")

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(logging.INFO)


def set_log_level(level: str) -> None:
    """
    Change the level of the shared logger.

    :param str level: Logging level name (e.g. "DEBUG", "INFO")
    """
    logger.setLevel(level.upper())
