"""Async retry policy for network-level failures.

Only failures raised before any response arrives are retried. Responses with
a non-2xx status are rejected by the caller after the transport call
succeeded, so they never reach this engine as retryable.

The boundary between the transport call and the retry loop is an explicit
two-case outcome: :func:`classify_attempt_failure` turns a raised exception
into :class:`Retryable` or :class:`Terminal`, and only ``Retryable`` outcomes
are attempted again.
"""
from __future__ import annotations

import asyncio
import functools
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol, TypeVar, Union

import httpx

from ...config.defaults import PROXY_DEFAULT_BACKOFF_SECONDS, PROXY_DEFAULT_MAX_ATTEMPTS
from ..errors import CompletionError, TransportError

T = TypeVar("T")


@dataclass(frozen=True)
class Retryable:
    """Attempt failed before a response; the call may be repeated."""

    error: CompletionError


@dataclass(frozen=True)
class Terminal:
    """Attempt failed in a way another attempt will not fix."""

    error: BaseException


AttemptOutcome = Union[Retryable, Terminal]


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: BaseException | None,
    ) -> None: ...


def classify_attempt_failure(exc: BaseException) -> AttemptOutcome:
    """Map an exception raised by one attempt to a two-case outcome.

    ``httpx.TransportError`` (connect refused, DNS failure, read aborted before
    headers) and an already-normalized :class:`TransportError` are retryable.
    Everything else, including every :class:`CompletionError` built from a
    response, is terminal.
    """
    if isinstance(exc, TransportError):
        return Retryable(exc)
    if isinstance(exc, httpx.TransportError):
        return Retryable(TransportError(message=f"Network error: {exc}", raw=exc))
    return Terminal(exc)


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = PROXY_DEFAULT_MAX_ATTEMPTS
    backoff_seconds: float = PROXY_DEFAULT_BACKOFF_SECONDS  # upper bound of the random delay
    classifier: Callable[[BaseException], AttemptOutcome] = classify_attempt_failure
    attempt_logger: AttemptLogger | None = None

    def next_delay(self) -> float:
        if self.backoff_seconds <= 0:
            return 0.0
        return random.uniform(0, self.backoff_seconds)


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry_async(
    func: Callable[[], Awaitable[T]], config: RetryConfig = DEFAULT_RETRY_CONFIG
) -> T:
    """Await ``func()`` applying ``config``.

    Returns the first successful result. A ``Terminal`` outcome re-raises the
    original exception unchanged; a ``Retryable`` outcome on the last attempt
    raises its normalized :class:`TransportError`.
    """
    attempts = max(1, config.max_attempts)
    for attempt in range(attempts):
        try:
            result = await func()
        except Exception as exc:  # noqa: BLE001 - classified below
            outcome = config.classifier(exc)
            is_last = attempt == attempts - 1
            if isinstance(outcome, Terminal) or is_last:
                if config.attempt_logger:
                    config.attempt_logger(
                        attempt=attempt, max_attempts=attempts, delay=None, error=outcome.error
                    )
                if outcome.error is exc:
                    raise
                raise outcome.error from exc
            delay = config.next_delay()
            if config.attempt_logger:
                config.attempt_logger(
                    attempt=attempt, max_attempts=attempts, delay=delay, error=outcome.error
                )
            await asyncio.sleep(delay)
            continue
        if config.attempt_logger:
            config.attempt_logger(attempt=attempt, max_attempts=attempts, delay=None, error=None)
        return result
    raise RuntimeError("retry_async: reached terminal state without result")  # pragma: no cover


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Decorator form of :func:`retry_async` for coroutine functions."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await retry_async(lambda: func(*args, **kwargs), config)

        return wrapper

    return decorator


__all__ = [
    "AttemptOutcome",
    "Retryable",
    "Terminal",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "classify_attempt_failure",
    "retry_async",
    "retry",
]
