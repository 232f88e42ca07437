"""Proxy-path completion client.

Purpose:
    Issue completions through the backend's proxy endpoints so that callers
    never hold the provider credential. Requests are JSON ``POST`` bodies of
    ``{"messages": [...], <camelCase options>}``; responses are the camelCase
    CompletionResult JSON (or a text stream for the streaming endpoint).

Failure semantics:
    - Network failures before a response are retried by
      :func:`retry_async` (two attempts total by default, small random pause).
    - A non-2xx response is never retried; it raises :class:`APIError` with
      the message ``"Claude API error: <status> - <message>"`` where
      ``<message>`` is the body's ``message`` (or ``error``) field, falling
      back to the HTTP reason phrase.
    - Streams are only retried while opening; once headers are accepted the
      stream is handed to the caller and failures surface while reading.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..base.constants import PROXY_ERROR_LABEL
from ..base.errors import APIError, code_for_status
from ..base.http import create_async_client
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event
from ..base.models import CompletionOptions, CompletionResult
from ..base.resilience import RetryConfig, make_attempt_logger, retry_async
from ..base.streaming import CompletionStream
from ..base.timeouts import get_timeout_config
from ..base.utils.messages import PromptInput, to_message_list
from ..config import get_provider_config

_logger = get_logger("tailor_ai.client")


def _error_message(response: httpx.Response) -> str:
    """Return the server-supplied error message, falling back to the reason phrase."""
    try:
        body = response.json()
    except (ValueError, httpx.ResponseNotRead):
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return response.reason_phrase


def _error_type(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except (ValueError, httpx.ResponseNotRead):
        return None
    if isinstance(body, dict) and isinstance(body.get("type"), str):
        return body["type"]
    return None


def api_error_from_response(response: httpx.Response) -> APIError:
    """Build the proxy-path :class:`APIError` for a non-2xx response.

    An unread or unreadable body falls back to the HTTP reason phrase.
    """
    status = response.status_code
    return APIError(
        message=f"{PROXY_ERROR_LABEL} API error: {status} - {_error_message(response)}",
        status=status,
        error_type=_error_type(response),
        request_id=response.headers.get("request-id") or response.headers.get("x-request-id"),
        code=code_for_status(status),
    )


def build_request_body(prompt: PromptInput, options: CompletionOptions) -> Dict[str, Any]:
    """JSON body for both proxy endpoints; absent options are omitted."""
    body: Dict[str, Any] = {"messages": [m.to_dict() for m in to_message_list(prompt)]}
    body.update(options.to_proxy_fields())
    return body


class ProxyCompletionClient:
    """Async client for the backend proxy endpoints.

    Parameters:
        base_url: Backend origin; defaults to the ``proxy`` config section.
        transport: Optional ``httpx`` transport (e.g. ``httpx.MockTransport``).
        retry_config: Retry policy; defaults to the ``proxy`` config section
            with structured attempt logging.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        cfg = get_provider_config("proxy")
        self.base_url = base_url or cfg["base_url"]
        self.endpoint = cfg["endpoint"]
        self.stream_endpoint = cfg["stream_endpoint"]
        self._http = create_async_client(self.base_url, transport=transport)
        self._retry_config = retry_config or RetryConfig(
            max_attempts=int(cfg["max_attempts"]),
            backoff_seconds=float(cfg["backoff_seconds"]),
            attempt_logger=make_attempt_logger(_logger, LogContext(path="proxy"), phase="request"),
        )

    async def __aenter__(self) -> "ProxyCompletionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def generate_completion(
        self,
        prompt: PromptInput,
        options: Optional[CompletionOptions] = None,
        **overrides: Any,
    ) -> CompletionResult:
        """POST to the completion endpoint and return the parsed result.

        Raises:
            TransportError: every attempt failed before a response arrived.
            APIError: the endpoint answered with a non-2xx status.
        """
        opts = CompletionOptions.from_value(options, **overrides)
        body = build_request_body(prompt, opts)
        ctx = LogContext(model=opts.model, path=self.endpoint)
        normalized_log_event(
            _logger, "completion.start", ctx, phase="start", messages=len(body["messages"])
        )
        t0 = time.perf_counter()

        async def _send() -> httpx.Response:
            return await self._http.post(self.endpoint, json=body)

        response = await retry_async(_send, self._retry_config)
        if not response.is_success:
            err = api_error_from_response(response)
            normalized_log_event(
                _logger,
                "completion.error",
                ctx,
                phase="response",
                error_code=err.code.value,
                level=logging.ERROR,
                status=err.status,
                error=err.message,
            )
            raise err
        result = CompletionResult.from_payload(response.json())
        ctx.response_id = result.id or None
        normalized_log_event(
            _logger,
            "completion.end",
            ctx,
            phase="finalize",
            tokens={"input": result.usage.input_tokens, "output": result.usage.output_tokens},
            latency_ms=round((time.perf_counter() - t0) * 1000, 2),
        )
        return result

    async def analyze_text(
        self,
        text: str,
        system_prompt: str,
        options: Optional[CompletionOptions] = None,
        **overrides: Any,
    ) -> CompletionResult:
        """Send ``text`` as the sole user message with ``system_prompt`` as the system option."""
        opts = CompletionOptions.from_value(options, **overrides).merged(system=system_prompt)
        return await self.generate_completion(text, opts)

    async def stream_completion(
        self,
        prompt: PromptInput,
        options: Optional[CompletionOptions] = None,
        **overrides: Any,
    ) -> CompletionStream:
        """POST to the streaming endpoint and return the unread byte stream.

        Raises:
            TransportError: the stream could not be opened.
            APIError: the endpoint answered with a non-2xx status.
        """
        opts = CompletionOptions.from_value(options, **overrides)
        body = build_request_body(prompt, opts)
        ctx = LogContext(model=opts.model, path=self.stream_endpoint)
        timeout = get_timeout_config().to_httpx_stream()

        async def _open() -> httpx.Response:
            request = self._http.build_request("POST", self.stream_endpoint, json=body, timeout=timeout)
            return await self._http.send(request, stream=True)

        response = await retry_async(_open, self._retry_config)
        if not response.is_success:
            try:
                await response.aread()
            except httpx.TransportError as exc:
                # body lost; the error is built from the status line alone
                log_event(
                    _logger,
                    "stream.error_body_unread",
                    ctx,
                    level=logging.WARNING,
                    status=response.status_code,
                    error=str(exc),
                )
            finally:
                await response.aclose()
            err = api_error_from_response(response)
            normalized_log_event(
                _logger,
                "stream.error",
                ctx,
                phase="start",
                error_code=err.code.value,
                level=logging.ERROR,
                status=err.status,
                error=err.message,
            )
            raise err
        normalized_log_event(_logger, "stream.start", ctx, phase="start")
        return CompletionStream(
            response.aiter_bytes(), on_close=response.aclose, logger=_logger, ctx=ctx
        )


__all__ = [
    "ProxyCompletionClient",
    "api_error_from_response",
    "build_request_body",
]
