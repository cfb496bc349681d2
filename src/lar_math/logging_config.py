"""
Logging setup for lar_math
==========================

Every module logs through logging.getLogger(__name__), so all records
land under the "lar_math" logger. Importing the package configures
nothing; scripts and the self-test call setup_logging() once.

    DEBUG: per-step counts (faces traced, pairs removed, exterior row)
    INFO:  one summary line per assembled complex
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "lar_math"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route lar_math records to stdout (and optionally a file).

    Calling it again replaces the previous handlers.

    Returns:
        the "lar_math" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
