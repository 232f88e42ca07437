"""
Error classification for the completion layer.

Two helpers live here:

``classify_exception``
    Maps any exception to a normalized :class:`ErrorCode` using, in order,
    passthrough of already-normalized errors, timeout/transport types, HTTP
    status extraction, and message heuristics. The backend service uses it to
    choose a response status.

``handle_provider_error``
    The three-way classifier applied to every failure on the direct path:

    1. ``anthropic.APIError`` -> logged with ``{status, type, requestId}`` and
       converted to :class:`APIError` with the message
       ``"Anthropic API error (<status>): <message>"``. Connection-level SDK
       errors (no response received) become :class:`TransportError`.
    2. Any other exception -> logged and returned unchanged (same object).
    3. Anything else -> logged under an "unknown error" marker and wrapped in
       :class:`UnknownError` whose message is ``str(value)``.

    Logging is a side effect; callers always raise the returned value.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import anthropic
import httpx

from ..logging import get_logger, log_event
from .completion_error import APIError, CompletionError, TransportError, UnknownError
from .error_code import ErrorCode

PROVIDER_ERROR_LABEL = "Anthropic"


def _extract_status(exc: Any) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
    529: ErrorCode.UNAVAILABLE,
}


def code_for_status(status: Optional[int]) -> ErrorCode:
    """Return the :class:`ErrorCode` for an HTTP status (``UNKNOWN`` if unmapped)."""
    if status is None:
        return ErrorCode.UNKNOWN
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    return ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.UNKNOWN


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    """Substring heuristic mapping for exceptions without a status."""
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    pattern_groups = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.AUTH, ("authentication", "unauthorized", "api key", "forbidden")),
        (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
        (ErrorCode.UNAVAILABLE, ("unavailable", "overloaded")),
        (ErrorCode.VALIDATION, ("validation", "invalid", "malformed")),
        (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
    )
    for code, patterns in pattern_groups:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. CompletionError with a specific code, or with a mappable status.
        2. Timeout exceptions (stdlib, asyncio, httpx, SDK).
        3. Transport/connection exceptions.
        4. HTTP status mapping.
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, CompletionError):
        if exc.code is not ErrorCode.UNKNOWN:
            return exc.code
        if exc.status is not None:
            return code_for_status(exc.status)
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException, anthropic.APITimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (httpx.TransportError, anthropic.APIConnectionError)):
        return ErrorCode.TRANSIENT
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


def _api_error_type(error: anthropic.APIError) -> Optional[str]:
    """Return the provider error type from the SDK error or its JSON body."""
    explicit = getattr(error, "type", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        inner = body.get("error")
        if isinstance(inner, dict) and isinstance(inner.get("type"), str):
            return inner["type"]
        if isinstance(body.get("type"), str) and body["type"] != "error":
            return body["type"]
    return None


def handle_provider_error(error: object, logger: Optional[logging.Logger] = None) -> BaseException:
    """Normalize any caught value into a raisable error, logging it as a side effect.

    Args:
        error: Whatever was caught (SDK error, generic exception, or any value).
        logger: Optional logger; defaults to ``tailor_ai.anthropic``.

    Returns:
        BaseException: The normalized error. Generic exceptions are returned
        as the identical object so identity and traceback are preserved.
    """
    log = logger or get_logger("tailor_ai.anthropic")

    if isinstance(error, anthropic.APIError):
        original = getattr(error, "message", None) or str(error)
        status = _extract_status(error)
        error_type = _api_error_type(error)
        request_id = getattr(error, "request_id", None)
        if status is None:
            message = f"{PROVIDER_ERROR_LABEL} connection error: {original}"
            log_event(log, "provider.error", level=logging.ERROR, message=message, kind="connection")
            return TransportError(message=message, code=classify_exception(error), raw=error)
        message = f"{PROVIDER_ERROR_LABEL} API error ({status}): {original}"
        details: Dict[str, Any] = {"status": status}
        if error_type:
            details["type"] = error_type
        if request_id:
            details["requestId"] = request_id
        log_event(log, "provider.error", level=logging.ERROR, message=message, details=details)
        return APIError(
            message=message,
            status=status,
            error_type=error_type,
            request_id=request_id,
            code=code_for_status(status),
            raw=error,
        )

    if isinstance(error, BaseException):
        log_event(
            log,
            "provider.error",
            level=logging.ERROR,
            message=f"{PROVIDER_ERROR_LABEL} client error: {error}",
            error_class=type(error).__name__,
        )
        return error

    message = str(error)
    log_event(
        log,
        "provider.error",
        level=logging.ERROR,
        message=f"Unknown error with {PROVIDER_ERROR_LABEL} client: {message}",
        unknown=True,
        value_type=type(error).__name__,
    )
    return UnknownError(message=message, raw=error)


__all__ = [
    "PROVIDER_ERROR_LABEL",
    "classify_exception",
    "code_for_status",
    "handle_provider_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
