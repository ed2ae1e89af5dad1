"""Logging configuration for the mdcheck package."""

import logging
from typing import Union


DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Attach a stderr handler to the package logger and set its level.

    Safe to call more than once; the handler is only added the first time.
    """
    if isinstance(level, str):
        level_value = getattr(logging, level.upper(), logging.WARNING)
    else:
        level_value = level

    package_logger = logging.getLogger("mdcheck")
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_DATE_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(level_value)
