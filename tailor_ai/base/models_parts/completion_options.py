"""
Completion options shared by the proxy and direct paths.

All fields are optional. Absent fields are omitted from outbound requests so
that provider (or proxy server) defaults apply. Two renderings exist because
the two transports name parameters differently:

* ``to_provider_params`` - Anthropic Messages API names (``max_tokens``,
  ``stop_sequences``, ``top_k``, ...).
* ``to_proxy_fields`` - camelCase JSON fields understood by the backend
  proxy endpoints (``maxTokens``, ``stopSequences``, ``topK``, ...).
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Union

from .tool_spec import ToolSpec

# (attribute, provider param, proxy field)
_OPTION_NAMES = (
    ("temperature", "temperature", "temperature"),
    ("max_tokens", "max_tokens", "maxTokens"),
    ("system", "system", "system"),
    ("stop_sequences", "stop_sequences", "stopSequences"),
    ("top_k", "top_k", "topK"),
    ("top_p", "top_p", "topP"),
    ("model", "model", "model"),
)


@dataclass(frozen=True)
class CompletionOptions:
    """Recognized per-call completion options.

    Attributes:
        temperature: Sampling temperature.
        max_tokens: Upper bound on generated tokens.
        system: System prompt.
        stop_sequences: Custom stop sequences; empty lists are omitted.
        top_k: Top-K sampling.
        top_p: Nucleus sampling.
        model: Model identifier; the direct path falls back to configuration.
        tools: Tool specifications; empty lists are omitted.
    """

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    system: Optional[str] = None
    stop_sequences: Optional[List[str]] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None
    model: Optional[str] = None
    tools: Optional[List[ToolSpec]] = None

    def merged(self, **overrides: Any) -> "CompletionOptions":
        """Return a copy with ``overrides`` applied (``None`` values ignored)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def _present(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for attr, _, _ in _OPTION_NAMES:
            value = getattr(self, attr)
            if value is None:
                continue
            if attr == "stop_sequences":
                if not value:
                    continue
                value = list(value)
            out[attr] = value
        return out

    def _tool_dicts(self) -> List[Dict[str, Any]]:
        return [ToolSpec.from_value(t).to_dict() for t in self.tools or []]

    def to_provider_params(self) -> Dict[str, Any]:
        """Render present options using the provider's parameter names."""
        names = {attr: provider for attr, provider, _ in _OPTION_NAMES}
        params = {names[k]: v for k, v in self._present().items()}
        if tools := self._tool_dicts():
            params["tools"] = tools
        return params

    def to_proxy_fields(self) -> Dict[str, Any]:
        """Render present options using the proxy endpoint's camelCase fields."""
        names = {attr: proxy for attr, _, proxy in _OPTION_NAMES}
        body = {names[k]: v for k, v in self._present().items()}
        if tools := self._tool_dicts():
            body["tools"] = tools
        return body

    @classmethod
    def from_value(
        cls, value: Union["CompletionOptions", Mapping[str, Any], None] = None, **overrides: Any
    ) -> "CompletionOptions":
        """Build options from an instance, a mapping (snake or camel keys) or keywords."""
        if isinstance(value, CompletionOptions):
            base = value
        else:
            data: Dict[str, Any] = {}
            aliases = {proxy: attr for attr, _, proxy in _OPTION_NAMES}
            known = {f.name for f in fields(cls)}
            for key, item in (value or {}).items():
                attr = aliases.get(key, key)
                if attr not in known:
                    raise TypeError(f"unknown completion option: {key}")
                data[attr] = item
            if data.get("tools") is not None:
                data["tools"] = [ToolSpec.from_value(t) for t in data["tools"]]
            base = cls(**data)
        return base.merged(**overrides) if overrides else base


__all__ = ["CompletionOptions"]
