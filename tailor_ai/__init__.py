"""tailor_ai package

AI completion client layer for the résumé tailoring app.

Purpose:
    Turn application requests (analyze a job description, tailor a résumé)
    into LLM completions through one of two paths:

    - Proxy path (:mod:`tailor_ai.client`): POSTs to the backend service and
      never holds the provider credential.
    - Direct path (:mod:`tailor_ai.anthropic`): calls the Anthropic Messages
      API with ``ANTHROPIC_API_KEY``; trusted server contexts only.

Public API (re-exported):
    - Version: ``__version__``
    - Proxy path: :func:`generate_completion`, :func:`analyze_text`,
      :func:`stream_completion`, :class:`ProxyCompletionClient`
    - Direct path: :func:`generate_completion_direct`,
      :func:`stream_completion_direct`, :func:`get_anthropic_client`,
      :func:`reset_anthropic_client`
    - Models and errors from :mod:`tailor_ai.base`
"""

from .anthropic import (
    generate_completion_direct,
    get_anthropic_client,
    reset_anthropic_client,
    stream_completion_direct,
)
from .base.errors import (
    APIError,
    CompletionError,
    ConfigurationError,
    ErrorCode,
    FormatError,
    TransportError,
    UnknownError,
    handle_provider_error,
)
from .base.models import CompletionOptions, CompletionResult, Message, ToolSpec
from .base.streaming import CompletionStream
from .base.utils.messages import normalize_messages
from .client import (
    ProxyCompletionClient,
    analyze_text,
    generate_completion,
    stream_completion,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "generate_completion",
    "analyze_text",
    "stream_completion",
    "ProxyCompletionClient",
    "generate_completion_direct",
    "stream_completion_direct",
    "get_anthropic_client",
    "reset_anthropic_client",
    "normalize_messages",
    "handle_provider_error",
    "CompletionOptions",
    "CompletionResult",
    "CompletionStream",
    "Message",
    "ToolSpec",
    "APIError",
    "CompletionError",
    "ConfigurationError",
    "ErrorCode",
    "FormatError",
    "TransportError",
    "UnknownError",
]
