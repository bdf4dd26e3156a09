"""
Exception types and error handling helpers.

This module defines the error taxonomy of the host OS layer and the
`handle_error` helper used wherever an error is logged and swallowed
instead of propagated.
"""

import logging
from enum import Enum
from typing import Any, Optional, Sequence, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when configuration or argument validation fails.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class HostOSError(Exception):
    """Base class for runtime failures of the host OS layer."""


class CommandExecutionError(HostOSError):
    """
    Raised when an external command cannot be launched or reports a fault.

    Attributes:
        argv: The tokenized command that failed.
        returncode: Exit status when the process ran, None if it never started.
        stderr: Captured standard error, if any.
    """

    def __init__(self, message: str, argv: Sequence[str] = (),
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.argv = tuple(argv)
        self.returncode = returncode
        self.stderr = stderr


class GroupResolutionError(HostOSError):
    """Raised when the group for a new account cannot be determined."""


class UnsupportedPlatformParse(HostOSError):
    """Raised when platform command output does not have the expected shape."""


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
        effective_logger.error(error_msg, exc_info=error)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=error)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)
