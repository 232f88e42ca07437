"""Structured ``retry.attempt`` logging for :class:`RetryConfig`."""
from __future__ import annotations

import logging

from ..errors import classify_exception
from ..logging import LogContext, normalized_log_event
from .retry import AttemptLogger


def make_attempt_logger(
    logger: logging.Logger, ctx: LogContext | None = None, phase: str = "retry"
) -> AttemptLogger:
    """Return an attempt logger emitting one normalized event per attempt.

    Failed attempts that will be retried are logged at WARNING, the final
    failure at ERROR and the successful attempt at DEBUG.
    """

    def _attempt_logger(
        *, attempt: int, max_attempts: int, delay: float | None, error: BaseException | None
    ) -> None:
        will_retry = bool(error is not None and delay is not None)
        if error is None:
            level = logging.DEBUG
        elif will_retry:
            level = logging.WARNING
        else:
            level = logging.ERROR
        normalized_log_event(
            logger,
            "retry.attempt",
            ctx,
            phase=phase,
            attempt=attempt,
            max_attempts=max_attempts,
            delay=delay,
            error_code=(classify_exception(error).value if error is not None else None),
            will_retry=will_retry,
            tokens=None,
            emitted=None,
            level=level,
        )

    return _attempt_logger


__all__ = ["make_attempt_logger"]
