from __future__ import annotations

import copy
import json

import pytest

from tailor_ai.base.errors import FormatError
from tailor_ai.base.models import Message
from tailor_ai.base.utils.messages import (
    normalize_block,
    normalize_messages,
    normalize_prompt,
    to_message_list,
)


IMAGE = {
    "type": "image",
    "source": {"type": "base64", "media_type": "image/png", "data": "iVBORw0KGgo="},
}


def test_string_content_passes_through():
    out = normalize_messages([{"role": "user", "content": "Tailor my résumé"}])
    assert out == [{"role": "user", "content": "Tailor my résumé"}]


def test_block_count_and_order_preserved():
    blocks = [
        {"type": "text", "text": "first"},
        IMAGE,
        {"type": "document", "title": "cv.pdf"},
        {"type": "text", "text": "last"},
    ]
    out = normalize_messages([{"role": "user", "content": blocks}])
    content = out[0]["content"]
    assert len(content) == len(blocks)
    assert [b["type"] for b in content] == ["text", "image", "text", "text"]
    assert content[0] == {"type": "text", "text": "first"}
    assert content[-1] == {"type": "text", "text": "last"}


def test_text_block_is_shape_preserving():
    block = {"type": "text", "text": "hello", "cache_control": {"type": "ephemeral"}}
    assert normalize_block(block) == block


def test_base64_image_is_kept():
    assert normalize_block(IMAGE) == IMAGE


@pytest.mark.parametrize(
    "block",
    [
        {"type": "image"},
        {"type": "image", "source": None},
        {"type": "image", "source": {"type": "url", "url": "https://example.com/a.png"}},
        {"type": "image", "source": "base64"},
    ],
)
def test_image_without_recognized_source_fails(block):
    with pytest.raises(FormatError) as ei:
        normalize_messages([{"role": "user", "content": [block]}])
    assert str(ei.value) == "Unsupported image source type"


def test_unknown_block_becomes_json_text():
    block = {"type": "tool_result", "tool_use_id": "toolu_1", "content": "42"}
    out = normalize_block(block)
    assert out["type"] == "text"
    assert json.loads(out["text"]) == block


def test_unhashable_or_missing_tag_is_coerced_not_raised():
    assert normalize_block({"type": ["text"], "text": "x"})["type"] == "text"
    assert normalize_block({"text": "no tag"})["type"] == "text"
    assert normalize_block("bare string") == {"type": "text", "text": '"bare string"'}


def test_normalization_does_not_mutate_input():
    messages = [{"role": "user", "content": [{"type": "text", "text": "a"}, IMAGE]}]
    snapshot = copy.deepcopy(messages)
    out = normalize_messages(messages)
    assert messages == snapshot
    out[0]["content"][0]["text"] = "changed"
    assert messages == snapshot


def test_roles_are_not_validated():
    out = normalize_messages([{"role": "system", "content": "be terse"}])
    assert out[0]["role"] == "system"


def test_message_objects_and_prompt_strings():
    assert normalize_prompt("hi") == [{"role": "user", "content": "hi"}]
    msgs = to_message_list([Message(role="assistant", content="ok"), {"role": "user", "content": "next"}])
    assert [m.role for m in msgs] == ["assistant", "user"]


def test_non_mapping_message_rejected():
    with pytest.raises(TypeError):
        normalize_messages(["not a message"])  # type: ignore[list-item]
