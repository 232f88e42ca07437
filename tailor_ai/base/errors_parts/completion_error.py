"""
Structured completion error exception types.

Every failure surfaced by this package is a :class:`CompletionError` (or, for
generic runtime exceptions passed through the classifier, the original
exception object). The subclasses mirror the failure taxonomy:

- :class:`ConfigurationError` - required credential missing; never retried.
- :class:`FormatError` - a content block cannot be normalized; never retried.
- :class:`TransportError` - network failure before any response; retryable.
- :class:`APIError` - well-formed failure response (rate limit, auth, ...).
- :class:`UnknownError` - wraps a non-exception value that was raised/rejected.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class CompletionError(Exception):
    """Normalized completion failure.

    Attributes:
        message: Human-readable message; also the ``str()`` of the exception.
        status: HTTP status code when the failure came from a response.
        error_type: Provider error type (e.g. ``"rate_limit_error"``).
        request_id: Provider request id for support/diagnostics.
        code: Normalized :class:`ErrorCode` classification.
        raw: Optional original exception or value for diagnostics.
    """

    message: str
    status: Optional[int] = None
    error_type: Optional[str] = None
    request_id: Optional[str] = None
    code: ErrorCode = ErrorCode.UNKNOWN
    raw: Optional[Any] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Return the normalized error shape with absent fields omitted."""
        data: Dict[str, Any] = {"message": self.message}
        if self.status is not None:
            data["status"] = self.status
        if self.error_type is not None:
            data["type"] = self.error_type
        if self.request_id is not None:
            data["requestId"] = self.request_id
        return data


@dataclass(eq=False)
class ConfigurationError(CompletionError):
    code: ErrorCode = ErrorCode.CONFIGURATION


@dataclass(eq=False)
class FormatError(CompletionError):
    code: ErrorCode = ErrorCode.FORMAT


@dataclass(eq=False)
class TransportError(CompletionError):
    code: ErrorCode = ErrorCode.TRANSIENT


@dataclass(eq=False)
class APIError(CompletionError):
    pass


@dataclass(eq=False)
class UnknownError(CompletionError):
    pass


__all__ = [
    "CompletionError",
    "ConfigurationError",
    "FormatError",
    "TransportError",
    "APIError",
    "UnknownError",
]
