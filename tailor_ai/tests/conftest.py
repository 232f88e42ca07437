"""Pytest configuration for the completion layer test suite.

Every test runs with a clean credential/config environment and an empty
provider-client slot so results never depend on the developer's shell or on
test ordering.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from tailor_ai.anthropic.client_manager import reset_anthropic_client
from tailor_ai.base.logging import BASE_LOGGER_NAME, get_logger
from tailor_ai.config import reset_config_cache

_ISOLATED_ENV = (
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_MAX_RETRIES",
    "ANTHROPIC_MAX_TOKENS",
    "TAILOR_AI_CONFIG_FILE",
    "TAILOR_AI_PROXY_BASE_URL",
    "TAILOR_AI_PROXY_MAX_ATTEMPTS",
    "TAILOR_AI_PROXY_BACKOFF_SECONDS",
    "TAILOR_AI_HTTP_TIMEOUT_SECONDS",
    "TAILOR_AI_CONNECT_TIMEOUT_SECONDS",
    "TAILOR_AI_STREAM_TIMEOUT_SECONDS",
    "TAILOR_AI_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear credential/config env vars and point .env loading at a missing file."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    reset_anthropic_client()
    yield
    reset_anthropic_client()
    reset_config_cache()


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class CapturedEvents:
    """Structured events logged under the ``tailor_ai`` logger during a test."""

    def __init__(self, handler: _ListHandler) -> None:
        self._handler = handler

    def all(self) -> List[Dict[str, Any]]:
        out = []
        for record in self._handler.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if isinstance(payload, dict):
                payload["_level"] = record.levelno
                out.append(payload)
        return out

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.all() if e.get("event") == event]


@pytest.fixture()
def captured_events() -> Iterator[CapturedEvents]:
    """Attach a list handler to the shared logger (it does not propagate to root)."""
    base = get_logger(BASE_LOGGER_NAME)
    handler = _ListHandler()
    base.addHandler(handler)
    try:
        yield CapturedEvents(handler)
    finally:
        base.removeHandler(handler)
