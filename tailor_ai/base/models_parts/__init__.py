"""Models parts package public surface.

Re-exports individual DTOs so callers can import from
`tailor_ai.base.models_parts` if needed, while `tailor_ai.base.models` remains
the primary stable import path.
"""

from .content_block import ContentBlock, ImageBlock, ImageSource, TextBlock
from .message import Message, Role
from .tool_spec import ToolSpec
from .completion_options import CompletionOptions
from .completion_result import CompletionResult, Usage

__all__ = [
    "ContentBlock",
    "ImageBlock",
    "ImageSource",
    "TextBlock",
    "Message",
    "Role",
    "ToolSpec",
    "CompletionOptions",
    "CompletionResult",
    "Usage",
]
