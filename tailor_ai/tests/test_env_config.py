from __future__ import annotations

import json

import httpx

from tailor_ai.base.timeouts import TimeoutConfig, get_timeout_config
from tailor_ai.config import get_provider_config, reset_config_cache
from tailor_ai.config.env import get_env_var_name, is_placeholder, resolve_provider_key


def test_defaults():
    anth = get_provider_config("anthropic")
    assert anth["model"] == "claude-3-7-sonnet-20250219"
    assert anth["max_retries"] == 3
    proxy = get_provider_config("proxy")
    assert proxy["endpoint"] == "/api/ai/claude"
    assert proxy["stream_endpoint"] == "/api/ai/claude-stream"
    assert proxy["max_attempts"] == 2


def test_env_overrides_are_coerced(monkeypatch):
    monkeypatch.setenv("TAILOR_AI_PROXY_MAX_ATTEMPTS", "4")
    monkeypatch.setenv("TAILOR_AI_PROXY_BACKOFF_SECONDS", "0.5")
    monkeypatch.setenv("TAILOR_AI_PROXY_BASE_URL", "https://resume.example.test")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-123")
    proxy = get_provider_config("proxy")
    assert proxy["max_attempts"] == 4
    assert proxy["backoff_seconds"] == 0.5
    assert proxy["base_url"] == "https://resume.example.test"
    assert get_provider_config("anthropic")["api_key"] == "sk-ant-123"


def test_yaml_file_then_env_then_overrides(monkeypatch, tmp_path):
    cfg = tmp_path / "tailor.yaml"
    cfg.write_text("anthropic:\n  model: claude-from-file\n  max_tokens: 2048\n", encoding="utf-8")
    monkeypatch.setenv("TAILOR_AI_CONFIG_FILE", str(cfg))
    reset_config_cache()
    assert get_provider_config("anthropic")["model"] == "claude-from-file"
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-from-env")
    merged = get_provider_config("anthropic", {"max_tokens": 10, "model": None})
    assert merged["model"] == "claude-from-env"
    assert merged["max_tokens"] == 10


def test_json_file(monkeypatch, tmp_path):
    cfg = tmp_path / "tailor.json"
    cfg.write_text(json.dumps({"proxy": {"base_url": "http://json.test"}}), encoding="utf-8")
    monkeypatch.setenv("TAILOR_AI_CONFIG_FILE", str(cfg))
    reset_config_cache()
    assert get_provider_config("proxy")["base_url"] == "http://json.test"


def test_dotenv_fills_placeholder(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("# local secrets\nANTHROPIC_API_KEY='sk-ant-dotenv'\n", encoding="utf-8")
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    monkeypatch.setenv("ANTHROPIC_API_KEY", "changeme")
    reset_config_cache()
    assert get_provider_config("anthropic")["api_key"] == "sk-ant-dotenv"


def test_dotenv_never_overrides_real_values(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ANTHROPIC_API_KEY=sk-ant-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-real")
    reset_config_cache()
    assert get_provider_config("anthropic")["api_key"] == "sk-ant-real"


def test_placeholders_and_key_resolution(monkeypatch):
    assert is_placeholder("your-api-key-here")
    assert is_placeholder(" CHANGEME ")
    assert not is_placeholder("sk-ant-abc")
    assert not is_placeholder(None)
    assert get_env_var_name("Anthropic") == "ANTHROPIC_API_KEY"
    assert resolve_provider_key("anthropic") == (None, "ANTHROPIC_API_KEY")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "placeholder")
    assert resolve_provider_key("anthropic") == (None, "ANTHROPIC_API_KEY")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-abc")
    assert resolve_provider_key("anthropic") == ("sk-ant-abc", "ANTHROPIC_API_KEY")
    assert resolve_provider_key("unknown") == (None, None)


def test_timeout_config_env_and_fallbacks(monkeypatch):
    assert get_timeout_config() == TimeoutConfig()
    monkeypatch.setenv("TAILOR_AI_HTTP_TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("TAILOR_AI_CONNECT_TIMEOUT_SECONDS", "not-a-number")
    monkeypatch.setenv("TAILOR_AI_STREAM_TIMEOUT_SECONDS", "-5")
    cfg = get_timeout_config()
    assert cfg.http_timeout_seconds == 30.0
    assert cfg.connect_timeout_seconds == TimeoutConfig().connect_timeout_seconds
    assert cfg.stream_timeout_seconds == TimeoutConfig().stream_timeout_seconds
    timeout = cfg.to_httpx()
    assert isinstance(timeout, httpx.Timeout)
    assert timeout.read == 30.0
    assert cfg.to_httpx_stream().read == cfg.stream_timeout_seconds
