"""Opt-in console logging for the client package."""
import logging

from rich.logging import RichHandler

PACKAGE_LOGGER = "vl_client"


def setup_logging(level: str) -> logging.Logger:
    """Route ``vl_client`` log records to a RichHandler at ``level``."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(logger.removeHandler, logger.handlers[:]))
    logger.addHandler(RichHandler(rich_tracebacks=True))
    return logger
