import logging
import traceback
from functools import wraps
from typing import Any, Callable, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


class ProgressError(Exception):
    """Base class for stream-progress errors"""


class InvalidConfiguration(ProgressError, ValueError):
    """A session or config value is out of range"""
    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class EstimationFailure(ProgressError):
    """Arithmetic breakdown while computing percent or ETA"""
    def __init__(self, context: str, cause: Optional[BaseException] = None):
        self.context = context
        self.cause = cause
        message = f"Estimation failed in {context}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class SessionClosed(ProgressError):
    """An item was observed after the session ended"""


# Exceptions an estimation step may raise on degenerate input
ESTIMATION_ERRORS = (ArithmeticError, ValueError)


def get_friendly_message(error: Exception) -> str:
    """Get a one-line message for an error"""
    if isinstance(error, InvalidConfiguration):
        return f"Configuration error: {error.field} {error.reason} (got {error.value!r})"
    if isinstance(error, SessionClosed):
        return "Progress session already finished"
    if isinstance(error, FileNotFoundError):
        return f"File not found: {error.filename if error.filename else error}"
    if isinstance(error, PermissionError):
        return "Permission denied. Check that you can read/write this location."
    if isinstance(error, UnicodeDecodeError):
        return "Input is not valid text in the requested encoding"
    return f"Unexpected error: {str(error)[:200]}"


def handle_error(
    error: Exception,
    context: str = "",
    level: int = logging.ERROR,
    log: Optional[logging.Logger] = None,
) -> str:
    """Log error to `log` (default: this module's logger) and return friendly message"""
    log = log or logger
    log.log(level, f"Error in {context}: {error}")
    log.debug(traceback.format_exc())
    return get_friendly_message(error)


def estimation_step(context: str):
    """Decorator turning arithmetic errors of an estimation step into EstimationFailure"""
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except EstimationFailure:
                raise
            except ESTIMATION_ERRORS as e:
                raise EstimationFailure(context, e) from e
        return wrapper
    return decorator
