"""
Validation and error handling for the hostos package.

This module provides the error taxonomy, input validation and error
logging helpers with consistent error reporting across the package.
"""

# Core exception classes and error handling
from .exceptions import (
    CommandExecutionError,
    ErrorSeverity,
    GroupResolutionError,
    HostOSError,
    UnsupportedPlatformParse,
    ValidationError,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
)

# Validation functions
from .validators import (
    validate_bool,
    validate_non_empty_string,
    validate_positive_float,
)

__all__ = [
    # Core functionality
    "CommandExecutionError",
    "ErrorSeverity",
    "GroupResolutionError",
    "HostOSError",
    "UnsupportedPlatformParse",
    "ValidationError",
    "handle_config_error",
    "handle_error",
    "handle_subprocess_error",
    # Validators
    "validate_bool",
    "validate_non_empty_string",
    "validate_positive_float",
]
