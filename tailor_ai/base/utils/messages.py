"""Message normalization into the provider's native calling convention.

Helpers here are pure: they never mutate their input and perform no I/O.

Normalization contract
- String content passes through unchanged.
- Every content block maps to exactly one output block, in input order.
- ``text`` blocks are copied as-is.
- ``image`` blocks must carry a ``source`` whose ``type`` the provider
  accepts (``base64``); otherwise :class:`FormatError` is raised.
- Any other block is coerced to a ``text`` block holding the JSON
  serialization of the block, so nothing is silently dropped.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Mapping, Sequence, Union

from ..constants import SUPPORTED_IMAGE_SOURCE_TYPES, UNSUPPORTED_IMAGE_SOURCE_ERROR
from ..errors import FormatError
from ..models import Message

PromptInput = Union[str, Sequence[Union[Message, Mapping[str, Any]]]]


def to_message_list(prompt: PromptInput) -> List[Message]:
    """Return ``prompt`` as a list of messages.

    A plain string becomes a single user message; a sequence is coerced
    element-wise via :meth:`Message.from_value`.
    """
    if isinstance(prompt, str):
        return [Message(role="user", content=prompt)]
    return [Message.from_value(m) for m in prompt]


def _as_mapping(block: Any) -> Any:
    dump = getattr(block, "model_dump", None)
    if callable(dump):
        return dump(exclude_none=True)
    return block


def _normalize_text(block: Mapping[str, Any]) -> Dict[str, Any]:
    return dict(block)


def _normalize_image(block: Mapping[str, Any]) -> Dict[str, Any]:
    source = block.get("source")
    if not isinstance(source, Mapping) or source.get("type") not in SUPPORTED_IMAGE_SOURCE_TYPES:
        raise FormatError(message=UNSUPPORTED_IMAGE_SOURCE_ERROR)
    return {
        "type": "image",
        "source": {
            "type": source["type"],
            "media_type": source.get("media_type"),
            "data": source.get("data"),
        },
    }


def _coerce_to_text(block: Any) -> Dict[str, Any]:
    return {"type": "text", "text": json.dumps(block, ensure_ascii=False, default=str)}


_BLOCK_NORMALIZERS: Dict[str, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
    "text": _normalize_text,
    "image": _normalize_image,
}


def normalize_block(block: Any) -> Dict[str, Any]:
    """Normalize a single content block (one in, exactly one out)."""
    block = _as_mapping(block)
    if isinstance(block, Mapping):
        tag = block.get("type")
        handler = _BLOCK_NORMALIZERS.get(tag) if isinstance(tag, str) else None
        if handler is not None:
            return handler(block)
    return _coerce_to_text(block)


def normalize_messages(messages: Sequence[Union[Message, Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    """Convert application messages into provider ``messages`` parameters.

    Parameters
    - messages: ``Message`` DTOs or ``{"role", "content"}`` mappings.

    Returns
    - A new list of ``{"role", "content"}`` dicts, same length and order.

    Raises
    - FormatError: when an image block has a missing/unsupported source.
    """
    normalized: List[Dict[str, Any]] = []
    for raw in messages:
        message = Message.from_value(raw)
        if isinstance(message.content, str):
            content: Union[str, List[Dict[str, Any]]] = message.content
        else:
            content = [normalize_block(b) for b in message.content]
        normalized.append({"role": message.role, "content": content})
    return normalized


def normalize_prompt(prompt: PromptInput) -> List[Dict[str, Any]]:
    """Normalize a string prompt or message list in one step."""
    return normalize_messages(to_message_list(prompt))


__all__ = [
    "PromptInput",
    "to_message_list",
    "normalize_block",
    "normalize_messages",
    "normalize_prompt",
]
