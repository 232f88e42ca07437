"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `tailor_ai.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .completion_error import (
    APIError,
    CompletionError,
    ConfigurationError,
    FormatError,
    TransportError,
    UnknownError,
)
from .classification import classify_exception, handle_provider_error

__all__ = [
    "ErrorCode",
    "CompletionError",
    "ConfigurationError",
    "FormatError",
    "TransportError",
    "APIError",
    "UnknownError",
    "classify_exception",
    "handle_provider_error",
]
