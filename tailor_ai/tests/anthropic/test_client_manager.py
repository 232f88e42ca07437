from __future__ import annotations

import anthropic
import pytest

from tailor_ai.anthropic import get_anthropic_client, reset_anthropic_client
from tailor_ai.base.errors import ConfigurationError


def test_get_returns_cached_instance(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-key")
    first = get_anthropic_client()
    second = get_anthropic_client()
    assert isinstance(first, anthropic.AsyncAnthropic)
    assert first is second


def test_reset_discards_cached_instance(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-key")
    first = get_anthropic_client()
    reset_anthropic_client()
    second = get_anthropic_client()
    assert second is not first
    assert get_anthropic_client() is second


def test_missing_credential_fails_at_first_use():
    with pytest.raises(ConfigurationError) as ei:
        get_anthropic_client()
    assert str(ei.value) == "ANTHROPIC_API_KEY is not set in environment variables"


def test_placeholder_credential_counts_as_missing(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "changeme")
    with pytest.raises(ConfigurationError):
        get_anthropic_client()


def test_client_uses_configured_retries_and_timeout(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-key")
    monkeypatch.setenv("ANTHROPIC_MAX_RETRIES", "5")
    monkeypatch.setenv("TAILOR_AI_HTTP_TIMEOUT_SECONDS", "12")
    client = get_anthropic_client()
    assert client.max_retries == 5
    assert client.timeout == 12.0


def test_lifecycle_is_logged(monkeypatch, captured_events):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-key")
    get_anthropic_client()
    get_anthropic_client()
    reset_anthropic_client()
    assert len(captured_events.named("client.create")) == 1
    (reset,) = captured_events.named("client.reset")
    assert reset["had_client"] is True
