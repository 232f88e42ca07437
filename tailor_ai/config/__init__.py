"""Unified configuration layer.

Goals
-----
* Centralize defaults (model, proxy endpoints, retry policy).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by TAILOR_AI_CONFIG_FILE
    3. Environment variables (e.g. ANTHROPIC_MODEL, TAILOR_AI_PROXY_BASE_URL)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(section)``.

Environment Variable Conventions
--------------------------------
<PREFIX>_<FIELD> where PREFIX is ``ANTHROPIC`` for the ``anthropic`` section
and ``TAILOR_AI_PROXY`` for the ``proxy`` section, e.g. ``ANTHROPIC_API_KEY``,
``ANTHROPIC_MAX_RETRIES``, ``TAILOR_AI_PROXY_MAX_ATTEMPTS``.

External Config File (Optional)
-------------------------------
```
anthropic:
  model: claude-3-7-sonnet-20250219
  max_retries: 3
proxy:
  base_url: https://resume.example.internal
  max_attempts: 2
```

A ``.env`` file (path from ``DOTENV_FILE``, default ``.env``) is loaded once
before the environment is consulted. It only fills variables that are unset
or hold placeholder values.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_MAX_RETRIES,
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_DEFAULT_MODEL,
    PROXY_COMPLETION_ENDPOINT,
    PROXY_DEFAULT_BACKOFF_SECONDS,
    PROXY_DEFAULT_BASE_URL,
    PROXY_DEFAULT_MAX_ATTEMPTS,
    PROXY_STREAM_ENDPOINT,
)
from .env import is_placeholder


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "anthropic": {
        "model": ANTHROPIC_DEFAULT_MODEL,
        "max_retries": ANTHROPIC_DEFAULT_MAX_RETRIES,
        "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
    },
    "proxy": {
        "base_url": PROXY_DEFAULT_BASE_URL,
        "endpoint": PROXY_COMPLETION_ENDPOINT,
        "stream_endpoint": PROXY_STREAM_ENDPOINT,
        "max_attempts": PROXY_DEFAULT_MAX_ATTEMPTS,
        "backoff_seconds": PROXY_DEFAULT_BACKOFF_SECONDS,
    },
}

ENV_PREFIXES: Dict[str, str] = {
    "anthropic": "ANTHROPIC",
    "proxy": "TAILOR_AI_PROXY",
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "endpoint": "ENDPOINT",
    "stream_endpoint": "STREAM_ENDPOINT",
    "max_retries": "MAX_RETRIES",
    "max_tokens": "MAX_TOKENS",
    "max_attempts": "MAX_ATTEMPTS",
    "backoff_seconds": "BACKOFF_SECONDS",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("TAILOR_AI_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _coerce(value: str, default: Any) -> Any:
    """Coerce an env string to the type of the built-in default."""
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


def _env_overrides(section: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = ENV_PREFIXES.get(section, section.upper())
    defaults = DEFAULTS.get(section, {})
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is None or val == "":
            continue
        out[field] = _coerce(val, defaults.get(field))
    return out


def get_provider_config(section: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a section (``anthropic`` or ``proxy``).

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    _load_dotenv_once()
    name = (section or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(section: str = "anthropic") -> Optional[str]:
    return get_provider_config(section).get("model")


def reset_config_cache() -> None:
    """Forget the cached external config file and .env load state."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
