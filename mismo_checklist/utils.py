"""
Shared helpers.
"""

import logging
import os


LOGGER_NAME = "mismo_checklist"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = None) -> logging.Logger:
    """
    Configure and return the package logger.

    Safe to call from every module; handlers are only attached once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level_name = (level or os.getenv("CHECKLIST_LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not any(h.get_name() == LOGGER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(LOGGER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
