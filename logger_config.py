"""
Logging setup shared by every newsearch module.

Modules import the ready ``logger``; components that want their own name
in the output use ``get_logger("spellcheck")`` which returns a child of it.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from config import (
    LOG_LEVEL, LOG_FILE, LOG_CONSOLE_LEVEL, LOG_MAX_BYTES, LOG_BACKUP_COUNT, LOG_QUIET_LIBRARIES
)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _level(name: str, default: int = logging.INFO) -> int:
    return getattr(logging, str(name).upper(), default)


def setup_logger(name: str = "newsearch", log_file: str = LOG_FILE) -> logging.Logger:
    """
    Configure the package logger once: console on stderr plus an optional
    size-rotated UTF-8 file.

    Args:
        name: Logger name
        log_file: Path of the log file, None for console only

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(LOG_LEVEL))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_level(LOG_CONSOLE_LEVEL))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for library in LOG_QUIET_LIBRARIES:
        logging.getLogger(library).setLevel(logging.WARNING)

    return logger


def get_logger(component: str) -> logging.Logger:
    """Child logger, e.g. ``newsearch.spellcheck``; shares the package handlers."""
    return logger.getChild(component)


# Global logger instance
logger = setup_logger()
