"""tailor_ai.config.env
====================

Environment variable mapping and helpers for provider credentials.

Helpers never raise on unknown providers or unset variables; callers decide
how to proceed. The direct path turns an absent credential into a
``ConfigurationError`` at first use.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder value.

    Heuristics: contains 'placeholder', 'changeme', or 'your-api-key'. The
    check is case-insensitive and ignores surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "your-api-key" in v


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider."""
    return ENV_MAP.get(provider.lower()) if provider else None


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from the process environment.

    Returns:
        (value, env_var_used). ``(None, env_var)`` when the variable is unset,
        empty or a placeholder; ``(None, None)`` for unknown providers.
    """
    name = get_env_var_name(provider)
    if name is None:
        return None, None
    val = (os.environ.get(name) or "").strip()
    if not val or is_placeholder(val):
        return None, name
    return val, name


__all__ = [
    "ENV_MAP",
    "is_placeholder",
    "get_env_var_name",
    "resolve_provider_key",
]
