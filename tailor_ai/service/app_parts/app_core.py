from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from tailor_ai.anthropic import (
    ToolRegistry,
    create_message,
    execute_tool_calls,
    extract_tool_calls,
    format_tool_results,
    stream_completion_direct,
)
from tailor_ai.anthropic.helpers import build_params
from tailor_ai.base.constants import MISSING_PROMPT_ERROR
from tailor_ai.base.errors import CompletionError, ErrorCode, classify_exception
from tailor_ai.base.logging import get_logger, log_event
from tailor_ai.base.models import CompletionOptions, CompletionResult
from tailor_ai.base.streaming import CompletionStream
from tailor_ai.config.defaults import (
    SERVICE_DEFAULT_MAX_TOKENS,
    SERVICE_DEFAULT_TEMPERATURE,
    SERVICE_DEFAULT_TOP_P,
)

logger = get_logger("tailor_ai.service")


class ChatMessageBody(BaseModel):
    """A single inbound message; content is a string or a list of blocks."""

    role: str
    content: Union[str, List[Any]]


class CompletionBody(BaseModel):
    """Body accepted by both completion endpoints.

    Field names follow the proxy client's camelCase wire format; snake_case
    names are accepted too. Either ``prompt`` or a non-empty ``messages`` list
    is required (checked by :func:`validate_body`).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    prompt: Optional[str] = None
    messages: Optional[List[ChatMessageBody]] = None
    max_tokens: Optional[int] = Field(default=None, alias="maxTokens")
    temperature: Optional[float] = None
    top_p: Optional[float] = Field(default=None, alias="topP")
    top_k: Optional[int] = Field(default=None, alias="topK")
    stop_sequences: Optional[List[str]] = Field(default=None, alias="stopSequences")
    system: Optional[str] = None
    model: Optional[str] = None
    tools: Optional[List[Dict[str, Any]]] = None


def validate_body(body: CompletionBody) -> Optional[JSONResponse]:
    """Return a 400 response when neither ``prompt`` nor ``messages`` is given."""
    if not body.prompt and not body.messages:
        return JSONResponse(
            status_code=400,
            content={"error": MISSING_PROMPT_ERROR, "message": MISSING_PROMPT_ERROR},
        )
    return None


def _prompt_of(body: CompletionBody) -> Union[str, List[Dict[str, Any]]]:
    if body.messages:
        return [m.model_dump() for m in body.messages]
    return body.prompt or ""


def _options_of(body: CompletionBody) -> CompletionOptions:
    """Apply server-side sampling defaults to the options the client omitted."""
    return CompletionOptions.from_value(
        {
            "max_tokens": body.max_tokens or SERVICE_DEFAULT_MAX_TOKENS,
            "temperature": SERVICE_DEFAULT_TEMPERATURE if body.temperature is None else body.temperature,
            "top_p": SERVICE_DEFAULT_TOP_P if body.top_p is None else body.top_p,
            "top_k": body.top_k,
            "stop_sequences": body.stop_sequences,
            "system": body.system,
            "model": body.model,
            "tools": body.tools,
        }
    )


def _status_for(exc: BaseException) -> int:
    if isinstance(exc, CompletionError) and exc.status is not None:
        return exc.status
    code = classify_exception(exc)
    if code is ErrorCode.RATE_LIMIT:
        return 429
    if code is ErrorCode.AUTH:
        return 401
    return 500


def error_response(exc: BaseException, route: str) -> JSONResponse:
    """Render any failure as ``{"error", "message"}`` with a mapped status code."""
    message = str(exc) or "Unknown error"
    status = _status_for(exc)
    log_event(
        logger,
        "service.error",
        level=logging.ERROR,
        route=route,
        status=status,
        error=message,
        error_class=type(exc).__name__,
    )
    return JSONResponse(status_code=status, content={"error": message, "message": message})


async def run_completion(body: CompletionBody, registry: ToolRegistry) -> CompletionResult:
    """Run one completion, plus one tool follow-up when handlers apply.

    When the first response requests tools and the registry holds handlers,
    the calls are executed in order and a single follow-up request carries
    the ``tool_result`` blocks. The follow-up's messages are already in
    provider format and are not normalized again.
    """
    params = build_params(_prompt_of(body), _options_of(body))
    result = await create_message(params)
    calls = extract_tool_calls(result.content) if len(registry) else None
    if calls:
        tool_results = await execute_tool_calls(calls, registry)
        follow_up = dict(params)
        follow_up["messages"] = [
            *params["messages"],
            {"role": "assistant", "content": result.content},
            format_tool_results(tool_results),
        ]
        result = await create_message(follow_up)
        result.tool_results = [c.to_dict() for c in tool_results]
    return result


def to_completion_payload(result: CompletionResult) -> Dict[str, Any]:
    """camelCase response body with ``content`` flattened to its text."""
    payload = result.to_dict()
    payload["type"] = "completion"
    payload["role"] = "assistant"
    payload["content"] = result.text
    return payload


async def open_stream(body: CompletionBody) -> CompletionStream:
    return await stream_completion_direct(_prompt_of(body), _options_of(body))


async def stream_text(stream: CompletionStream) -> AsyncIterator[bytes]:
    """Relay stream deltas as UTF-8 bytes; a mid-stream failure ends the body."""
    try:
        async for text in stream.iter_text():
            yield text.encode("utf-8")
    except Exception as exc:  # noqa: BLE001 - headers already sent; log and end the body
        log_event(
            logger,
            "service.error",
            level=logging.ERROR,
            route="stream",
            error=str(exc),
            error_class=type(exc).__name__,
        )
    finally:
        await stream.aclose()


__all__ = [
    "ChatMessageBody",
    "CompletionBody",
    "validate_body",
    "error_response",
    "run_completion",
    "to_completion_payload",
    "open_stream",
    "stream_text",
]
