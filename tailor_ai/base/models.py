"""
Completion-layer domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``tailor_ai.base.models_parts``.
"""

from .models_parts.content_block import ContentBlock, ImageBlock, ImageSource, TextBlock
from .models_parts.message import Message, Role
from .models_parts.tool_spec import ToolSpec
from .models_parts.completion_options import CompletionOptions
from .models_parts.completion_result import CompletionResult, Usage

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
