"""Logging setup for the accio command line."""

import logging
import sys
from typing import Optional

from .models.config import LoggingConfig


class AccioStreamHandler(logging.StreamHandler):
    """Stderr handler installed by setup_logging."""


def setup_logging(config: Optional[LoggingConfig] = None, verbose: bool = False) -> logging.Logger:
    """
    Attach a stderr handler to the ``accio`` logger.

    Calling this again replaces the previously installed handler instead of
    stacking a second one.

    Args:
        config: Level and format to use; defaults when omitted
        verbose: Force DEBUG level regardless of the configured one

    Returns:
        The configured package logger
    """
    config = config or LoggingConfig()
    level = logging.DEBUG if verbose else config.get_level_number()

    package_logger = logging.getLogger("accio")
    for handler in list(package_logger.handlers):
        if isinstance(handler, AccioStreamHandler):
            package_logger.removeHandler(handler)

    handler = AccioStreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(config.format))

    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger
