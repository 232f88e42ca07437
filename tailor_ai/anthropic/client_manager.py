"""Process-wide Anthropic SDK client slot.

The direct path never constructs SDK clients itself; it always goes through
:func:`get_anthropic_client`, which lazily builds one ``anthropic.AsyncAnthropic``
instance and caches it until :func:`reset_anthropic_client` is called.

The credential check happens at first use, not at import, so code paths that
only use the proxy never need ``ANTHROPIC_API_KEY``. Two coroutines racing on
first use may both construct a client; the last assignment wins, which is
harmless because construction has no side effects outside this module.
"""
from __future__ import annotations

from typing import Optional

import anthropic

from ..base.constants import MISSING_API_KEY_ERROR
from ..base.errors import ConfigurationError
from ..base.logging import LogContext, get_logger, log_event
from ..base.timeouts import get_timeout_config
from ..config import get_provider_config
from ..config.env import get_env_var_name, is_placeholder

PROVIDER_NAME = "anthropic"

_logger = get_logger("tailor_ai.anthropic")


class _ClientSlot:
    """Single-slot holder; at most one live client."""

    __slots__ = ("client",)

    def __init__(self) -> None:
        self.client: Optional[anthropic.AsyncAnthropic] = None


_SLOT = _ClientSlot()


def _resolve_api_key() -> str:
    cfg = get_provider_config(PROVIDER_NAME)
    key = (cfg.get("api_key") or "").strip()
    if not key or is_placeholder(key):
        env_name = get_env_var_name(PROVIDER_NAME)
        raise ConfigurationError(message=f"{env_name} {MISSING_API_KEY_ERROR}")
    return key


def get_anthropic_client() -> anthropic.AsyncAnthropic:
    """Return the cached SDK client, constructing it on first use.

    Raises:
        ConfigurationError: ``ANTHROPIC_API_KEY`` is unset, empty or a placeholder.
    """
    if _SLOT.client is not None:
        return _SLOT.client
    api_key = _resolve_api_key()
    cfg = get_provider_config(PROVIDER_NAME)
    timeouts = get_timeout_config()
    client = anthropic.AsyncAnthropic(
        api_key=api_key,
        max_retries=int(cfg.get("max_retries", 0)),
        timeout=timeouts.http_timeout_seconds,
    )
    _SLOT.client = client
    log_event(
        _logger,
        "client.create",
        LogContext(provider=PROVIDER_NAME),
        max_retries=int(cfg.get("max_retries", 0)),
        timeout_seconds=timeouts.http_timeout_seconds,
    )
    return client


def reset_anthropic_client() -> None:
    """Discard the cached client; the next ``get_anthropic_client`` rebuilds it.

    The old client is not closed here because in-flight calls may still hold
    it; its connections are released when it is garbage collected.
    """
    had_client = _SLOT.client is not None
    _SLOT.client = None
    log_event(_logger, "client.reset", LogContext(provider=PROVIDER_NAME), had_client=had_client)


__all__ = ["get_anthropic_client", "reset_anthropic_client", "PROVIDER_NAME"]
