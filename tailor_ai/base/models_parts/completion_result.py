"""
CompletionResult DTO: the canonical shape returned by every completion path.

The direct path receives the SDK's snake_case ``Message`` object
(``stop_reason``, ``usage.input_tokens``); the proxy path receives camelCase
JSON (``stopReason``, ``usage.inputTokens``). Both are reconciled here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union


def _field(obj: Any, *names: str) -> Any:
    """Read the first present attribute or key among ``names``."""
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return None


def _block_to_dict(block: Any) -> Dict[str, Any]:
    if isinstance(block, Mapping):
        return dict(block)
    dump = getattr(block, "model_dump", None)
    if callable(dump):
        return dump(exclude_none=True)
    return {k: v for k, v in vars(block).items() if not k.startswith("_")}


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0

    @classmethod
    def from_value(cls, value: Any) -> "Usage":
        if value is None:
            return cls()
        return cls(
            input_tokens=int(_field(value, "input_tokens", "inputTokens") or 0),
            output_tokens=int(_field(value, "output_tokens", "outputTokens") or 0),
        )


@dataclass
class CompletionResult:
    """Normalized completion returned to callers.

    ``content`` is either the flattened text (proxy responses) or the list of
    content blocks as dictionaries (direct responses, which may include
    ``tool_use`` blocks). ``text`` gives a uniform plain-text view.
    """

    id: str
    type: str
    role: str
    content: Union[str, List[Dict[str, Any]]]
    model: str
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Usage = field(default_factory=Usage)
    tool_results: Optional[List[Dict[str, Any]]] = None

    @property
    def text(self) -> str:
        if isinstance(self.content, str):
            return self.content
        return "".join(b.get("text") or "" for b in self.content if b.get("type") == "text")

    @classmethod
    def from_provider_message(cls, message: Any) -> "CompletionResult":
        """Build from an SDK ``Message`` (or an equivalent snake_case mapping)."""
        raw_content = _field(message, "content")
        if isinstance(raw_content, str):
            content: Union[str, List[Dict[str, Any]]] = raw_content
        else:
            content = [_block_to_dict(b) for b in raw_content or []]
        return cls(
            id=_field(message, "id") or "",
            type=_field(message, "type") or "message",
            role=_field(message, "role") or "assistant",
            content=content,
            model=_field(message, "model") or "",
            stop_reason=_field(message, "stop_reason"),
            stop_sequence=_field(message, "stop_sequence"),
            usage=Usage.from_value(_field(message, "usage")),
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CompletionResult":
        """Build from the proxy endpoint's camelCase JSON body."""
        content = payload.get("content", "")
        if not isinstance(content, str):
            content = [_block_to_dict(b) for b in content or []]
        return cls(
            id=payload.get("id") or "",
            type=payload.get("type") or "completion",
            role=payload.get("role") or "assistant",
            content=content,
            model=payload.get("model") or "",
            stop_reason=_field(payload, "stopReason", "stop_reason"),
            stop_sequence=_field(payload, "stopSequence", "stop_sequence"),
            usage=Usage.from_value(payload.get("usage")),
            tool_results=_field(payload, "toolResults", "tool_results"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase wire shape served by the proxy endpoint."""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "role": self.role,
            "content": self.content,
            "model": self.model,
            "stopReason": self.stop_reason,
            "stopSequence": self.stop_sequence,
            "usage": {
                "inputTokens": self.usage.input_tokens,
                "outputTokens": self.usage.output_tokens,
            },
        }
        if self.tool_results is not None:
            data["toolResults"] = self.tool_results
        return data


__all__ = ["CompletionResult", "Usage"]
