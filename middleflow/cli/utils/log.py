"""Logging setup for the middleflow CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from middleflow.config import get_config

PACKAGE_LOGGER = "middleflow"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Route package log records to stderr through rich.

    ``--verbose`` lowers the level to DEBUG; otherwise the level comes from
    ``MIDDLEFLOW_LOG_LEVEL``. Calling this again only adjusts the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else get_config().log_level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    return logger
