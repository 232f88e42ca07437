"""Retry primitives shared by the completion paths."""

from .retry import (
    DEFAULT_RETRY_CONFIG,
    AttemptOutcome,
    Retryable,
    RetryConfig,
    Terminal,
    classify_attempt_failure,
    retry,
    retry_async,
)
from .attempt_logging import make_attempt_logger

__all__ = [
    "AttemptOutcome",
    "Retryable",
    "Terminal",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "classify_attempt_failure",
    "retry_async",
    "retry",
    "make_attempt_logger",
]
