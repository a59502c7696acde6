"""
Logging configuration for the inventory backend.

Output goes to stderr; uvicorn keeps its own access log.
"""

import logging
import sys

LOGGER_NAME = "inventory_backend"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the package logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ...). Unknown names fall back to INFO.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Avoid duplicate handlers if called multiple times
    logger.handlers.clear()
    logger.addHandler(handler)
