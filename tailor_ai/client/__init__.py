"""Proxy-path public surface.

Module-level helpers delegate to a lazily created default
:class:`ProxyCompletionClient` configured from the ``proxy`` config section.
Code that needs a custom base URL or transport should construct its own
client instead.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Tuple

from ..base.models import CompletionOptions, CompletionResult
from ..base.streaming import CompletionStream
from ..base.utils.messages import PromptInput
from .proxy import ProxyCompletionClient, api_error_from_response, build_request_body

_DEFAULT: Optional[Tuple[Optional[asyncio.AbstractEventLoop], ProxyCompletionClient]] = None


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def get_default_client() -> ProxyCompletionClient:
    """Return the default client for the running event loop.

    A client created under another loop is replaced, since its connections
    cannot be used from this one.
    """
    global _DEFAULT
    loop = _running_loop()
    if _DEFAULT is None or _DEFAULT[0] is not loop:
        _DEFAULT = (loop, ProxyCompletionClient())
    return _DEFAULT[1]


async def aclose_default_client() -> None:
    """Close the default client; the next call builds a new one."""
    global _DEFAULT
    current, _DEFAULT = _DEFAULT, None
    if current is not None and current[0] is _running_loop():
        await current[1].aclose()


async def generate_completion(
    prompt: PromptInput, options: Optional[CompletionOptions] = None, **overrides: Any
) -> CompletionResult:
    return await get_default_client().generate_completion(prompt, options, **overrides)


async def analyze_text(
    text: str, system_prompt: str, options: Optional[CompletionOptions] = None, **overrides: Any
) -> CompletionResult:
    return await get_default_client().analyze_text(text, system_prompt, options, **overrides)


async def stream_completion(
    prompt: PromptInput, options: Optional[CompletionOptions] = None, **overrides: Any
) -> CompletionStream:
    return await get_default_client().stream_completion(prompt, options, **overrides)


__all__ = [
    "ProxyCompletionClient",
    "api_error_from_response",
    "build_request_body",
    "get_default_client",
    "aclose_default_client",
    "generate_completion",
    "analyze_text",
    "stream_completion",
]
