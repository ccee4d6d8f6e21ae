"""
Package-wide logger for hvm.
"""

import logging
import sys


LOGGER_NAME = "hvm"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Return the named logger, attaching a stderr handler the first time.

    Args:
        name: Logger name

    Returns:
        Configured logging.Logger
    """
    _logger = logging.getLogger(name)
    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        _logger.addHandler(handler)
        _logger.setLevel(logging.INFO)
        _logger.propagate = False
    return _logger


logger = get_logger()


__all__ = [
    "get_logger",
    "logger",
]
