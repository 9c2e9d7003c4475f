"""
Logging Configuration
=====================
Routes the deck's log records (navigator transitions, lock releases, frame
overruns, dropped section descriptors) to the console and optionally a file.

Qt's own messages are not touched; only the 'glyphdeck' logger tree is
configured, so embedding the deck in another application leaves the host's
root logger alone.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "glyphdeck"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'glyphdeck' logger and returns it.

    Calling it again replaces the previous handlers, so a window reopened in
    the same interpreter does not print every record twice.

    Args:
        level: Logging level; --verbose maps to logging.DEBUG.
        log_file: Optional path; the file is truncated on every launch.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger
