"""
Logging for the video router.

Everything in the package logs through the ``video_router`` logger. The
console shows bare messages at INFO (DEBUG when verbose). The optional log
file always records DEBUG lines with timestamps, so provider payloads and
poll states from a failed run can be inspected afterwards.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LIBRARY_LOGGER_NAME = "video_router"
LOG_FILE_NAME = "video_router.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_library_logger: Optional[logging.Logger] = None


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(message)s'))
    return handler


def _file_handler(log_dir: str) -> logging.Handler:
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        log_path / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8'
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    return handler


def init_library_logger(verbose: bool = False, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the router logger.

    Handlers from an earlier call are closed and replaced, so the CLI can
    reconfigure a logger that library code already touched.

    Args:
        verbose: Show DEBUG messages on the console
        log_dir: Directory for video_router.log, usually ``RouterConfig.log_dir``.
            None logs to the console only.

    Returns:
        Configured logger
    """
    global _library_logger

    logger = logging.getLogger(LIBRARY_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_level = logging.DEBUG if verbose else logging.INFO
    logger.addHandler(_console_handler(console_level))

    if log_dir:
        file_handler = _file_handler(log_dir)
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
        logger.debug(f"Logging to: {file_handler.baseFilename}")
    else:
        logger.setLevel(console_level)

    _library_logger = logger
    return logger


def get_library_logger() -> logging.Logger:
    """Get the router logger, configuring it for the console on first use."""
    if _library_logger is None:
        return init_library_logger()
    return _library_logger
