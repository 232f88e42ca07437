"""Anthropic helpers module.

Purpose:
- Side-effect-free request parameter building for the direct path.

Notes:
- ``model`` and ``max_tokens`` are required by the Messages API, so when the
  caller omits them they are filled from the ``anthropic`` config section.
  Every other option is sent only when present.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.models import CompletionOptions
from ..base.utils.messages import PromptInput, normalize_prompt
from ..config import get_provider_config


def build_params(prompt: PromptInput, options: Optional[CompletionOptions] = None) -> Dict[str, Any]:
    """Build keyword arguments for ``client.messages.create`` / ``.stream``.

    Parameters:
        prompt: A string (sent as one user message) or a message list.
        options: Recognized completion options.

    Returns:
        Mapping with ``model``, ``max_tokens``, normalized ``messages`` and
        every present option under its provider parameter name.

    Raises:
        FormatError: A content block cannot be normalized.
    """
    opts = options or CompletionOptions()
    cfg = get_provider_config("anthropic")
    params: Dict[str, Any] = {
        "model": opts.model or cfg.get("model"),
        "max_tokens": opts.max_tokens or cfg.get("max_tokens"),
        "messages": normalize_prompt(prompt),
    }
    for key, value in opts.to_provider_params().items():
        if key in ("model", "max_tokens"):
            continue
        params[key] = value
    return params


__all__ = ["build_params"]
