from __future__ import annotations

import logging
import os
import sys

_LOGGER_NAME = "lungscan"
_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(level: str | None) -> int:
    if level is None:
        level = os.getenv("LUNGSCAN_LOG_LEVEL", "INFO")
    return _LEVELS.get(level.strip().upper(), logging.INFO)


def init_logging(level: str | None = None) -> logging.Logger:
    """Configure the package logger with a single stream handler.

    Calling it again swaps the handler instead of stacking a new one, so
    Streamlit reruns do not duplicate log lines.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    logger.addHandler(handler)
    logger.setLevel(_parse_level(level))
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if not name or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if not name.startswith(_LOGGER_NAME + "."):
        name = f"{_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
