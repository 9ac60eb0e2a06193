"""Logging helpers for the trio-binning CLI and library."""

from __future__ import annotations

import logging

LOGGER_NAME = "trio_binning"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(verbose: bool = False, level_name: str | None = None) -> logging.Logger:
    """Configure root logging and return the package logger.

    ``verbose`` wins over ``level_name`` (usually read from the environment).
    """

    level = logging.INFO
    if level_name:
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger or one of its children."""

    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
