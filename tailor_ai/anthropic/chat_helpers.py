"""Direct-path completion helpers.

Purpose:
- Issue completions straight against the Anthropic Messages API using the
  process-wide client from :mod:`tailor_ai.anthropic.client_manager`. Only
  valid in a trusted server context that holds ``ANTHROPIC_API_KEY``.

Error policy:
- Every failure (missing credential, unsupported content, SDK errors) is
  passed through :func:`handle_provider_error` before being raised, so SDK
  API errors surface as :class:`APIError` with status/type/request id while
  generic exceptions are re-raised as the identical object.

Retries:
- No retry loop runs here; the SDK client retries on its own according to
  ``max_retries`` from configuration.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, NoReturn, Optional

from ..base.errors import handle_provider_error
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import CompletionOptions, CompletionResult
from ..base.streaming import CompletionStream
from ..base.utils.messages import PromptInput
from .client_manager import PROVIDER_NAME, get_anthropic_client
from .helpers import build_params

_logger = get_logger("tailor_ai.anthropic")


def _raise_classified(exc: BaseException, ctx: LogContext, phase: str) -> NoReturn:
    err = handle_provider_error(exc, _logger)
    normalized_log_event(
        _logger,
        "completion.error",
        ctx,
        phase=phase,
        error_code=getattr(getattr(err, "code", None), "value", None),
        level=logging.ERROR,
        error=str(err),
    )
    if err is exc:
        raise exc
    raise err from exc


async def generate_completion_direct(
    prompt: PromptInput,
    options: Optional[CompletionOptions] = None,
    **overrides: Any,
) -> CompletionResult:
    """Create a completion through the Anthropic SDK.

    Parameters:
        prompt: A string (sent as one user message) or a message list.
        options: Completion options; ``overrides`` (snake or camel case keys)
            are merged on top.

    Returns:
        CompletionResult: the SDK message reconciled into the canonical shape.

    Raises:
        ConfigurationError, FormatError, APIError, TransportError, or the
        original exception for anything else.
    """
    opts = CompletionOptions.from_value(options, **overrides)
    ctx = LogContext(provider=PROVIDER_NAME, model=opts.model, path="direct")
    try:
        params = build_params(prompt, opts)
    except Exception as exc:  # noqa: BLE001 - classified and re-raised
        _raise_classified(exc, ctx, phase="start")
    return await create_message(params)


async def create_message(params: Dict[str, Any]) -> CompletionResult:
    """Send already-built ``messages.create`` params through the cached client.

    Used directly when the message list holds provider-native blocks that
    must not be normalized again (e.g. ``tool_use``/``tool_result`` turns).
    """
    ctx = LogContext(provider=PROVIDER_NAME, model=params.get("model"), path="direct")
    t0 = time.perf_counter()
    try:
        client = get_anthropic_client()
        normalized_log_event(
            _logger,
            "completion.start",
            ctx,
            phase="start",
            max_tokens=params.get("max_tokens"),
            temperature=params.get("temperature"),
        )
        message = await client.messages.create(**params)
    except Exception as exc:  # noqa: BLE001 - classified and re-raised
        _raise_classified(exc, ctx, phase="request")
    result = CompletionResult.from_provider_message(message)
    ctx.response_id = result.id or None
    normalized_log_event(
        _logger,
        "completion.end",
        ctx,
        phase="finalize",
        tokens={"input": result.usage.input_tokens, "output": result.usage.output_tokens},
        stop_reason=result.stop_reason,
        latency_ms=round((time.perf_counter() - t0) * 1000, 2),
    )
    return result


async def stream_completion_direct(
    prompt: PromptInput,
    options: Optional[CompletionOptions] = None,
    **overrides: Any,
) -> CompletionStream:
    """Open an SDK message stream and return it as a :class:`CompletionStream` of text deltas.

    The request is sent before this coroutine returns, so credential, format
    and API errors on open are raised here. Failures after the first delta are
    raised from the stream and are never retried.
    """
    opts = CompletionOptions.from_value(options, **overrides)
    ctx = LogContext(provider=PROVIDER_NAME, model=opts.model, path="direct")
    try:
        client = get_anthropic_client()
        params = build_params(prompt, opts)
        ctx.model = params["model"]
        manager = client.messages.stream(**params)
        stream = await manager.__aenter__()
    except Exception as exc:  # noqa: BLE001 - classified and re-raised
        _raise_classified(exc, ctx, phase="start")
    normalized_log_event(_logger, "stream.start", ctx, phase="start")

    async def _close() -> None:
        await manager.__aexit__(None, None, None)

    return CompletionStream(
        stream.text_stream.__aiter__(),
        on_close=_close,
        error_mapper=lambda e: handle_provider_error(e, _logger),
        logger=_logger,
        ctx=ctx,
    )


__all__ = ["create_message", "generate_completion_direct", "stream_completion_direct"]
