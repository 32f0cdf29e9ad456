"""
Centralized logging configuration for stream-progress.

This module provides a single logging setup path shared by the library and
the CLI. File logging is opt-in and rotates.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


# Global flag to prevent duplicate initialization
_logging_initialized = False

# Root namespace for every logger in the package
LOGGER_NAMESPACE = "stream_progress"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    force: bool = False,
    debug_mode: bool = False,
) -> logging.Logger:
    """
    Configure logging for the package.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path. No file handler when omitted.
        console: Whether to log to stderr
        force: Force reconfiguration even if already initialized
        debug_mode: Verbose logging with line numbers

    Returns:
        The package root logger
    """
    global _logging_initialized

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    if _logging_initialized and not force:
        return root_logger

    if debug_mode:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger.setLevel(log_level)

    # Clear any existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if debug_mode:
        formatter = logging.Formatter(
            "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d: %(message)s",
            datefmt=DATE_FORMAT
        )
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Rotating file handler: 5MB max, keep 3 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _logging_initialized = True

    root_logger.debug(f"Logging initialized: level={level}, file={log_file or '-'}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the package namespace.

    Usage:
        from stream_progress.logging_config import get_logger
        logger = get_logger(__name__)

    Unlike setup_logging, this never installs handlers, so importing the
    library does not change the host application's logging.
    """
    if name != LOGGER_NAMESPACE and not name.startswith(LOGGER_NAMESPACE + "."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)
