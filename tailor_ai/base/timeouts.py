"""Unified timeout configuration for the completion layer.

Timeouts are configured once and applied at client construction: the
Anthropic SDK client receives ``http_timeout_seconds``, and the proxy's
``httpx.AsyncClient`` receives the ``httpx.Timeout`` built by
:meth:`TimeoutConfig.to_httpx`. There is no per-call cancellation; a bounded
timeout is the only defense against a hung request.

Supported environment variables (all optional, positive floats):
    TAILOR_AI_HTTP_TIMEOUT_SECONDS
    TAILOR_AI_CONNECT_TIMEOUT_SECONDS
    TAILOR_AI_STREAM_TIMEOUT_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

from ..config.defaults import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_STREAM_TIMEOUT_SECONDS,
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Overall budget for a non-streaming request.
        connect_timeout_seconds: Budget for establishing a connection.
        stream_timeout_seconds: Idle read timeout between streamed chunks.
    """

    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    stream_timeout_seconds: float = DEFAULT_STREAM_TIMEOUT_SECONDS

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(self.http_timeout_seconds, connect=self.connect_timeout_seconds)

    def to_httpx_stream(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.http_timeout_seconds,
            connect=self.connect_timeout_seconds,
            read=self.stream_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None
_ENV_NAMES = (
    "TAILOR_AI_HTTP_TIMEOUT_SECONDS",
    "TAILOR_AI_CONNECT_TIMEOUT_SECONDS",
    "TAILOR_AI_STREAM_TIMEOUT_SECONDS",
)


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`.

    The cache is refreshed when any of the supported environment variables
    changes, so tests can adjust timeouts with ``monkeypatch.setenv``.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[0], DEFAULT_HTTP_TIMEOUT_SECONDS),
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[1], DEFAULT_CONNECT_TIMEOUT_SECONDS),
        stream_timeout_seconds=_parse_env_float(_ENV_NAMES[2], DEFAULT_STREAM_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
