"""
Validation and error handling for the devmgr package.

This module provides the exception hierarchy used to report errors as
process exit codes, plus the field validators used by the configuration
and naming rule loaders.
"""

from .exceptions import (
    DevmgrError,
    ErrorSeverity,
    HotplugInterrupted,
    InvalidQueryTypeError,
    RecordNotFoundError,
    StoreError,
    StoreOpenError,
    UsageError,
    ValidationError,
    handle_config_error,
    handle_error,
    handle_store_error,
)
from .validators import (
    validate_enum_choice,
    validate_file_mode,
    validate_non_empty_string,
    validate_positive_integer,
    validate_regex_pattern,
)

__all__ = [
    # Exceptions
    "DevmgrError",
    "ErrorSeverity",
    "HotplugInterrupted",
    "InvalidQueryTypeError",
    "RecordNotFoundError",
    "StoreError",
    "StoreOpenError",
    "UsageError",
    "ValidationError",
    "handle_config_error",
    "handle_error",
    "handle_store_error",
    # Validators
    "validate_enum_choice",
    "validate_file_mode",
    "validate_non_empty_string",
    "validate_positive_integer",
    "validate_regex_pattern",
]
