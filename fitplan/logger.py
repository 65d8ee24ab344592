"""Logging for the fitplan modules: one stdout handler per named logger."""

import logging
import sys

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level() -> int:
    level = logging.getLevelName(LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(_level())

    # module reloads call this again for the same name
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
