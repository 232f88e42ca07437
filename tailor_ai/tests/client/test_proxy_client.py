from __future__ import annotations

import asyncio
import json
from typing import List

import httpx
import pytest

from tailor_ai import client as proxy_module
from tailor_ai.base.errors import APIError, ErrorCode, TransportError
from tailor_ai.base.models import CompletionResult
from tailor_ai.base.resilience import RetryConfig
from tailor_ai.base.streaming import CompletionStream
from tailor_ai.client import ProxyCompletionClient

BASE_URL = "http://proxy.test"

COMPLETION_JSON = {
    "id": "msg_42",
    "type": "completion",
    "role": "assistant",
    "content": "Rewritten bullet point",
    "model": "claude-3-7-sonnet-20250219",
    "stopReason": "end_turn",
    "stopSequence": None,
    "usage": {"inputTokens": 12, "outputTokens": 5},
}


class Recorder:
    """MockTransport handler that replays a scripted list of outcomes."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def body(self, index: int = 0):
        return json.loads(self.requests[index].content)


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b"Dear hiring "
        raise httpx.ReadError("connection reset")


def _client(recorder: Recorder) -> ProxyCompletionClient:
    return ProxyCompletionClient(
        BASE_URL,
        transport=httpx.MockTransport(recorder),
        retry_config=RetryConfig(backoff_seconds=0),
    )


def _connect_error() -> httpx.ConnectError:
    return httpx.ConnectError("connection refused")


@pytest.mark.asyncio
async def test_completion_posts_messages_and_camelcase_options():
    rec = Recorder(httpx.Response(200, json=COMPLETION_JSON))
    async with _client(rec) as client:
        result = await client.generate_completion(
            "Improve this bullet", temperature=0.3, max_tokens=200, stop_sequences=["END"]
        )
    assert rec.requests[0].url == httpx.URL(BASE_URL + "/api/ai/claude")
    assert rec.body() == {
        "messages": [{"role": "user", "content": "Improve this bullet"}],
        "temperature": 0.3,
        "maxTokens": 200,
        "stopSequences": ["END"],
    }
    assert isinstance(result, CompletionResult)
    assert result.text == "Rewritten bullet point"
    assert result.usage.output_tokens == 5


@pytest.mark.asyncio
async def test_message_list_is_sent_unchanged():
    rec = Recorder(httpx.Response(200, json=COMPLETION_JSON))
    messages = [
        {"role": "user", "content": "Here is my resume"},
        {"role": "assistant", "content": "Thanks"},
        {"role": "user", "content": [{"type": "text", "text": "Tailor it"}]},
    ]
    async with _client(rec) as client:
        await client.generate_completion(messages)
    assert rec.body() == {"messages": messages}


@pytest.mark.asyncio
async def test_network_failure_is_retried_once():
    rec = Recorder(_connect_error(), httpx.Response(200, json=COMPLETION_JSON))
    async with _client(rec) as client:
        result = await client.generate_completion("hi")
    assert len(rec.requests) == 2
    assert result.id == "msg_42"


@pytest.mark.asyncio
async def test_persistent_network_failure_raises_transport_error(captured_events):
    rec = Recorder(_connect_error())
    async with _client(rec) as client:
        with pytest.raises(TransportError) as ei:
            await client.generate_completion("hi")
    assert len(rec.requests) == 2
    assert isinstance(ei.value.__cause__, httpx.ConnectError)
    attempts = captured_events.named("retry.attempt")
    assert [a["will_retry"] for a in attempts] == [True, False]


@pytest.mark.asyncio
async def test_rate_limit_is_not_retried_and_formats_message():
    rec = Recorder(httpx.Response(429, json={"message": "Rate limit exceeded"}))
    async with _client(rec) as client:
        with pytest.raises(APIError) as ei:
            await client.generate_completion("hi")
    assert str(ei.value) == "Claude API error: 429 - Rate limit exceeded"
    assert ei.value.status == 429
    assert ei.value.code is ErrorCode.RATE_LIMIT
    assert len(rec.requests) == 1


@pytest.mark.asyncio
async def test_error_field_and_reason_phrase_fallbacks():
    rec = Recorder(
        httpx.Response(400, json={"error": "Either prompt or messages is required"}),
        httpx.Response(500, text="<html>oops</html>"),
    )
    async with _client(rec) as client:
        with pytest.raises(APIError) as first:
            await client.generate_completion("hi")
        with pytest.raises(APIError) as second:
            await client.generate_completion("hi")
    assert str(first.value) == "Claude API error: 400 - Either prompt or messages is required"
    assert str(second.value) == "Claude API error: 500 - Internal Server Error"


@pytest.mark.asyncio
async def test_request_id_header_is_kept():
    rec = Recorder(httpx.Response(503, json={"message": "Overloaded"}, headers={"x-request-id": "req_9"}))
    async with _client(rec) as client:
        with pytest.raises(APIError) as ei:
            await client.generate_completion("hi")
    assert ei.value.request_id == "req_9"


@pytest.mark.asyncio
async def test_analyze_text_sends_system_prompt():
    rec = Recorder(httpx.Response(200, json=COMPLETION_JSON))
    async with _client(rec) as client:
        await client.analyze_text("Senior Python developer wanted", "Extract the required skills.")
    assert rec.body() == {
        "messages": [{"role": "user", "content": "Senior Python developer wanted"}],
        "system": "Extract the required skills.",
    }


@pytest.mark.asyncio
async def test_stream_returns_lazy_stream_object():
    rec = Recorder(httpx.Response(200, content=b"Dear hiring manager"))
    async with _client(rec) as client:
        stream = await client.stream_completion("Write a cover letter", max_tokens=300)
        assert isinstance(stream, CompletionStream)
        assert rec.requests[0].url.path == "/api/ai/claude-stream"
        assert rec.body()["maxTokens"] == 300
        assert await stream.read_text() == "Dear hiring manager"
        assert stream.closed
        with pytest.raises(RuntimeError):
            async for _ in stream:
                pass


@pytest.mark.asyncio
async def test_stream_open_error_raises_before_returning():
    rec = Recorder(httpx.Response(401, json={"message": "Invalid token"}))
    async with _client(rec) as client:
        with pytest.raises(APIError) as ei:
            await client.stream_completion("hi")
    assert str(ei.value) == "Claude API error: 401 - Invalid token"


@pytest.mark.asyncio
async def test_stream_open_retries_network_failure():
    rec = Recorder(_connect_error(), httpx.Response(200, content=b"ok"))
    async with _client(rec) as client:
        stream = await client.stream_completion("hi")
        assert await stream.read_text() == "ok"
    assert len(rec.requests) == 2


@pytest.mark.asyncio
async def test_mid_stream_failure_is_not_retried():
    rec = Recorder(httpx.Response(200, stream=_BrokenStream()))
    received = []
    async with _client(rec) as client:
        stream = await client.stream_completion("hi")
        with pytest.raises(TransportError):
            async for chunk in stream:
                received.append(chunk)
    assert received == [b"Dear hiring "]
    assert len(rec.requests) == 1
    assert stream.closed


@pytest.mark.asyncio
async def test_default_client_reads_base_url_from_env(monkeypatch):
    monkeypatch.setenv("TAILOR_AI_PROXY_BASE_URL", "https://resume.example.test")
    await proxy_module.aclose_default_client()
    try:
        client = proxy_module.get_default_client()
        assert client.base_url == "https://resume.example.test"
        assert proxy_module.get_default_client() is client
    finally:
        await proxy_module.aclose_default_client()


class _UnreadableBody(httpx.AsyncByteStream):
    async def __aiter__(self):
        raise httpx.ReadError("connection reset")
        yield b""  # pragma: no cover


@pytest.mark.asyncio
async def test_closing_one_client_leaves_siblings_usable():
    rec = Recorder(httpx.Response(200, json=COMPLETION_JSON))
    first = ProxyCompletionClient(BASE_URL)
    second = ProxyCompletionClient(BASE_URL)
    third = _client(rec)
    assert first._http is not second._http
    async with first:
        pass
    assert not second._http.is_closed
    result = await third.generate_completion("hi")
    assert result.id == "msg_42"
    await second.aclose()
    await third.aclose()


def test_default_client_is_rebuilt_for_each_event_loop():
    async def grab():
        return proxy_module.get_default_client()

    first = asyncio.run(grab())
    second = asyncio.run(grab())
    assert first is not second
    asyncio.run(proxy_module.aclose_default_client())


@pytest.mark.asyncio
async def test_non_mapping_blocks_are_sent_as_given():
    rec = Recorder(httpx.Response(200, json=COMPLETION_JSON))
    messages = [{"role": "user", "content": ["plain string block", 42]}]
    async with _client(rec) as client:
        await client.generate_completion(messages)
    assert rec.body()["messages"] == messages


@pytest.mark.asyncio
async def test_stream_open_error_with_unreadable_body_uses_reason_phrase():
    rec = Recorder(httpx.Response(503, stream=_UnreadableBody()))
    async with _client(rec) as client:
        with pytest.raises(APIError) as ei:
            await client.stream_completion("hi")
    assert str(ei.value) == "Claude API error: 503 - Service Unavailable"
    assert ei.value.status == 503
    assert len(rec.requests) == 1
