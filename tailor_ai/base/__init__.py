"""
Completion Layer Base Package

Exports the transport-agnostic pieces shared by the proxy and direct paths:

- Models (DTOs): messages, content blocks, options and results
- Errors: the completion error taxonomy and the provider error classifier
- Normalization: message/content-block conversion to the provider format
- Resilience: the async retry engine for network-level failures
- Streaming: the single-consumption completion stream
"""

from .errors import (
    APIError,
    CompletionError,
    ConfigurationError,
    ErrorCode,
    FormatError,
    TransportError,
    UnknownError,
    classify_exception,
    handle_provider_error,
)
from .models import (
    CompletionOptions,
    CompletionResult,
    ContentBlock,
    Message,
    Role,
    ToolSpec,
    Usage,
)
from .resilience import RetryConfig, retry_async
from .streaming import CompletionStream
from .timeouts import TimeoutConfig, get_timeout_config
from .utils import normalize_messages, normalize_prompt

__all__ = [
    "APIError",
    "CompletionError",
    "ConfigurationError",
    "ErrorCode",
    "FormatError",
    "TransportError",
    "UnknownError",
    "classify_exception",
    "handle_provider_error",
    "CompletionOptions",
    "CompletionResult",
    "ContentBlock",
    "Message",
    "Role",
    "ToolSpec",
    "Usage",
    "RetryConfig",
    "retry_async",
    "CompletionStream",
    "TimeoutConfig",
    "get_timeout_config",
    "normalize_messages",
    "normalize_prompt",
]
