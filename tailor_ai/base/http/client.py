"""Async HTTP client construction for the proxy path.

Purpose:
    Build ``httpx.AsyncClient`` instances whose timeouts derive exclusively
    from :func:`get_timeout_config`.

Lifecycle & cleanup:
    - Every call returns a new client owned by the caller; closing it never
      affects another caller's client.
    - ``httpx.AsyncClient`` is bound to the event loop it first runs on, so
      the owner should close it from that loop.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import get_timeout_config


def create_async_client(
    base_url: Optional[str],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` for ``base_url``.

    Parameters:
        base_url: Base URL so callers can issue relative requests.
        transport: Optional transport override (e.g. ``httpx.MockTransport``).
    """
    kwargs = {"timeout": get_timeout_config().to_httpx()}
    if base_url:
        kwargs["base_url"] = base_url
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)


__all__ = ["create_async_client"]
