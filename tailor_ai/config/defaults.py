"""tailor_ai.config.defaults
=========================

Central place for small, stable default values used across the completion
layer and the backend service. These defaults can be overridden via
environment variables or an external configuration file.

This module intentionally imports nothing from the rest of the package to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Anthropic (direct path) ----
ANTHROPIC_DEFAULT_MODEL = "claude-3-7-sonnet-20250219"
# SDK-level retries performed by the provider client itself.
ANTHROPIC_DEFAULT_MAX_RETRIES = 3
# The Messages API requires max_tokens; used only when the caller omits it.
ANTHROPIC_DEFAULT_MAX_TOKENS = 1024

# ---- Proxy path ----
PROXY_DEFAULT_BASE_URL = "http://localhost:8000"
PROXY_COMPLETION_ENDPOINT = "/api/ai/claude"
PROXY_STREAM_ENDPOINT = "/api/ai/claude-stream"
# Total attempts for a proxy request (first try + one retry on network failure).
PROXY_DEFAULT_MAX_ATTEMPTS = 2
# Upper bound of the randomized pause between attempts.
PROXY_DEFAULT_BACKOFF_SECONDS = 0.25

# ---- Timeouts (seconds) ----
DEFAULT_HTTP_TIMEOUT_SECONDS = 60.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_STREAM_TIMEOUT_SECONDS = 60.0

# ---- Backend service defaults (applied server-side, not by clients) ----
SERVICE_DEFAULT_MAX_TOKENS = 1024
SERVICE_DEFAULT_TEMPERATURE = 0.7
SERVICE_DEFAULT_TOP_P = 1.0
# Comma-separated list of allowed origins for the backend service.
SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


__all__ = [
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MAX_RETRIES",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "PROXY_DEFAULT_BASE_URL",
    "PROXY_COMPLETION_ENDPOINT",
    "PROXY_STREAM_ENDPOINT",
    "PROXY_DEFAULT_MAX_ATTEMPTS",
    "PROXY_DEFAULT_BACKOFF_SECONDS",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_STREAM_TIMEOUT_SECONDS",
    "SERVICE_DEFAULT_MAX_TOKENS",
    "SERVICE_DEFAULT_TEMPERATURE",
    "SERVICE_DEFAULT_TOP_P",
    "SERVICE_CORS_DEFAULT_ORIGINS",
]
