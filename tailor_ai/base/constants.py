"""Base shared constants for the completion layer.

Central location to avoid scattering magic strings across the proxy client,
the direct Anthropic path and the backend service.
"""
from __future__ import annotations

# Label used in proxy-path error messages: "Claude API error: <status> - <message>"
PROXY_ERROR_LABEL = "Claude"

# Missing credential message; the env var name is prefixed at the call site.
MISSING_API_KEY_ERROR = "is not set in environment variables"  # pragma: allowlist secret

UNSUPPORTED_IMAGE_SOURCE_ERROR = "Unsupported image source type"

MISSING_PROMPT_ERROR = "Either prompt or messages is required"

# Image source types accepted by the provider
SUPPORTED_IMAGE_SOURCE_TYPES = ("base64",)

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"

__all__ = [
    "PROXY_ERROR_LABEL",
    "MISSING_API_KEY_ERROR",
    "UNSUPPORTED_IMAGE_SOURCE_ERROR",
    "MISSING_PROMPT_ERROR",
    "SUPPORTED_IMAGE_SOURCE_TYPES",
    "STREAM_MEDIA_TYPE",
]
