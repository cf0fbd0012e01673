"""Logging helpers shared across netnet modules."""

from __future__ import annotations

import logging
import sys

from config import LOG_FORMAT, LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the netnet stream handler attached.

    Handlers are only added once per logger name, so repeated calls are safe.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(LOG_LEVEL)
    return logger


def set_level(level: int) -> None:
    """Change the level of every netnet logger created so far."""
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith('netnet') and isinstance(logger, logging.Logger):
            logger.setLevel(level)


parser_logger = get_logger('netnet.parser')
refresh_logger = get_logger('netnet.refresh')
