"""
Content block shapes accepted inside structured message content.

Blocks are plain mappings tagged by ``type``. Only ``text`` and ``image`` are
known to the provider; any other tag is carried as an opaque mapping and
coerced to text during normalization.
"""
from __future__ import annotations

from typing import Any, Literal, Mapping, TypedDict, Union


class TextBlock(TypedDict):
    type: Literal["text"]
    text: str


class ImageSource(TypedDict):
    type: Literal["base64"]
    media_type: str
    data: str


class ImageBlock(TypedDict):
    type: Literal["image"]
    source: ImageSource


# Any other shape is allowed and preserved as text by the normalizer.
ContentBlock = Union[TextBlock, ImageBlock, Mapping[str, Any]]


__all__ = ["TextBlock", "ImageSource", "ImageBlock", "ContentBlock"]
