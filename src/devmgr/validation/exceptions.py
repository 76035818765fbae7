"""
Exception types and error handling helpers.

Every error the device manager can report carries an ``errno`` value. The
command-line layer turns that value into the process exit status, so the
magnitude of the code tells a calling script what went wrong.
"""

import errno as errno_codes
import logging
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class DevmgrError(Exception):
    """Base class for all device manager errors."""

    errno: int = errno_codes.EINVAL

    def __init__(self, message: str, errno: Optional[int] = None):
        super().__init__(message)
        if errno is not None:
            self.errno = errno


class ValidationError(DevmgrError):
    """
    Exception raised when validation fails.

    This is the main exception type used throughout the validation system.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class UsageError(DevmgrError):
    """Malformed or incomplete command line in interactive mode."""


class InvalidQueryTypeError(UsageError):
    """The value given to ``-q`` is not a known query type."""

    def __init__(self, value: str):
        super().__init__(f"unknown query type '{value}'")
        self.value = value


class StoreError(DevmgrError):
    """Generic device record store failure."""

    errno = errno_codes.EIO


class StoreOpenError(StoreError):
    """The device record store could not be opened or initialized."""

    errno = errno_codes.EACCES


class RecordNotFoundError(StoreError):
    """No record exists for the requested sysfs path."""

    errno = errno_codes.ENODEV

    def __init__(self, path: str):
        super().__init__(f"no record for '{path}'")
        self.path = path


class HotplugInterrupted(DevmgrError):
    """A trapped signal was observed while handling a hotplug event."""

    def __init__(self, signum: int):
        super().__init__(f"interrupted by signal {signum}")
        self.signum = signum


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_store_error(error: Exception, context: str, **kwargs) -> None:
    """Handle device record store errors."""
    handle_error(error, f"store {context}", **kwargs)
