"""Unified completion error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``tailor_ai.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.completion_error import (
    APIError,
    CompletionError,
    ConfigurationError,
    FormatError,
    TransportError,
    UnknownError,
)
from .errors_parts.classification import (
    PROVIDER_ERROR_LABEL,
    classify_exception,
    code_for_status,
    handle_provider_error,
)

__all__ = [
    "ErrorCode",
    "CompletionError",
    "ConfigurationError",
    "FormatError",
    "TransportError",
    "APIError",
    "UnknownError",
    "PROVIDER_ERROR_LABEL",
    "classify_exception",
    "code_for_status",
    "handle_provider_error",
]
