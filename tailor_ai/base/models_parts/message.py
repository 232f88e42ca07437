"""
Message DTO used by both completion paths.

Content may be either plain text or an ordered list of content blocks. Roles
are caller-supplied and only checked for type, not value.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Mapping, Union

from .content_block import ContentBlock

Role = Literal["user", "assistant", "system"]


def _block_to_wire(block: Any) -> Any:
    """Copy mapping blocks; other shapes are sent as given."""
    if isinstance(block, Mapping):
        return dict(block)
    dump = getattr(block, "model_dump", None)
    if callable(dump):
        return dump(exclude_none=True)
    return block


@dataclass
class Message:
    """A chat message as supplied by application code.

    Attributes:
        role: ``"user"``, ``"assistant"`` or ``"system"``.
        content: A plain string or an ordered list of content blocks.
    """

    role: Role
    content: Union[str, List[ContentBlock]]

    def to_dict(self) -> Dict[str, Any]:
        content = self.content if isinstance(self.content, str) else [_block_to_wire(b) for b in self.content]
        return {"role": self.role, "content": content}

    @classmethod
    def from_value(cls, value: Union["Message", Mapping[str, Any]]) -> "Message":
        """Coerce a ``Message`` or a ``{"role", "content"}`` mapping into a ``Message``."""
        if isinstance(value, Message):
            return value
        if not isinstance(value, Mapping):
            raise TypeError(f"message must be a Message or mapping, got {type(value).__name__}")
        role = value.get("role")
        if not isinstance(role, str):
            raise TypeError("message role must be a string")
        content = value.get("content", "")
        if not isinstance(content, str):
            content = list(content or [])
        return cls(role=role, content=content)  # type: ignore[arg-type]


__all__ = ["Message", "Role"]
