"""Direct Anthropic path.

Trusted-server-only entry points that hold ``ANTHROPIC_API_KEY`` and call the
Messages API through the process-wide SDK client.
"""

from .client_manager import get_anthropic_client, reset_anthropic_client
from .chat_helpers import create_message, generate_completion_direct, stream_completion_direct
from .tools import (
    ToolCall,
    ToolInput,
    ToolOutput,
    ToolRegistry,
    convert_to_sdk_tool,
    create_tool,
    execute_tool_calls,
    extract_tool_calls,
    format_tool_results,
)

__all__ = [
    "get_anthropic_client",
    "reset_anthropic_client",
    "create_message",
    "generate_completion_direct",
    "stream_completion_direct",
    "ToolCall",
    "ToolInput",
    "ToolOutput",
    "ToolRegistry",
    "convert_to_sdk_tool",
    "create_tool",
    "execute_tool_calls",
    "extract_tool_calls",
    "format_tool_results",
]
