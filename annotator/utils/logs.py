"""Logging setup shared by the command line entry points."""

from __future__ import annotations

import logging

DEFAULT_LOGGER_NAME = "annotator"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def configure_logging(verbosity: int = 0, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the package logger.

    Attaches a single stderr handler the first time it is called so repeated
    CLI invocations in one process do not duplicate output. ``verbosity`` of 1
    enables INFO and 2 or more enables DEBUG.
    """

    logger = logging.getLogger(logger_name)
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
