"""Tool-use helpers for the direct path.

This module defines the tool call DTOs, a registry that maps tool names to
callables, and helpers that pull ``tool_use`` blocks out of a completion,
run them in order and format the follow-up ``tool_result`` message.
Handlers may be plain functions or coroutine functions; each receives the
tool arguments as a single ``dict``.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ..base.logging import get_logger, log_event
from ..base.models import ToolSpec

ToolHandler = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]

_logger = get_logger("tailor_ai.tools")


@dataclass
class ToolInput:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    tool_use_id: Optional[str] = None


@dataclass
class ToolOutput:
    output: Any = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"output": self.output}
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class ToolCall:
    input: ToolInput
    output: Optional[ToolOutput] = None

    def to_dict(self) -> Dict[str, Any]:
        """Shape used in the ``toolResults`` response field."""
        data: Dict[str, Any] = {
            "input": {"name": self.input.name, "arguments": self.input.arguments},
        }
        if self.output is not None:
            data["output"] = self.output.to_dict()
        return data


class ToolRegistry:
    """Name to handler registry.

    Contract:
        - Register handlers with ``register(name, handler)`` or as a decorator
          via ``tool(name)``.
        - ``handlers`` exposes a read-only snapshot for :func:`execute_tool_calls`.
    """

    def __init__(self, handlers: Optional[Mapping[str, ToolHandler]] = None) -> None:
        self._handlers: Dict[str, ToolHandler] = dict(handlers or {})

    def register(self, name: str, handler: ToolHandler) -> None:
        self._handlers[name] = handler

    def tool(self, name: str) -> Callable[[ToolHandler], ToolHandler]:
        def decorator(func: ToolHandler) -> ToolHandler:
            self.register(name, func)
            return func

        return decorator

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def clear(self) -> None:
        self._handlers.clear()

    @property
    def handlers(self) -> Dict[str, ToolHandler]:
        return dict(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def create_tool(name: str, description: Optional[str], input_schema: Dict[str, Any]) -> ToolSpec:
    return ToolSpec(name=name, input_schema=dict(input_schema), description=description)


def convert_to_sdk_tool(tool: Union[ToolSpec, Mapping[str, Any]]) -> Dict[str, Any]:
    """Return the ``{"name", "description", "input_schema"}`` dict the SDK expects."""
    return ToolSpec.from_value(tool).to_dict()


def _get(block: Any, key: str) -> Any:
    if isinstance(block, Mapping):
        return block.get(key)
    return getattr(block, key, None)


def extract_tool_calls(content: Any) -> Optional[List[ToolInput]]:
    """Return the ``tool_use`` blocks of ``content`` as :class:`ToolInput` items.

    Returns ``None`` for empty or string content and when no block is a
    ``tool_use`` block.
    """
    if not content or isinstance(content, str):
        return None
    if not isinstance(content, (list, tuple)):
        return None
    calls: List[ToolInput] = []
    for block in content:
        if _get(block, "type") != "tool_use":
            continue
        tool_use_id = _get(block, "id")
        calls.append(
            ToolInput(
                name=_get(block, "name") or tool_use_id,
                arguments=dict(_get(block, "input") or {}),
                tool_use_id=tool_use_id,
            )
        )
    return calls or None


async def execute_tool_calls(
    calls: Sequence[ToolInput], handlers: Union[ToolRegistry, Mapping[str, ToolHandler]]
) -> List[ToolCall]:
    """Run each call with its registered handler, in order.

    A missing handler or a handler exception is recorded in the call's
    :class:`ToolOutput` instead of being raised, so one failing tool does not
    abort the others.
    """
    table = handlers.handlers if isinstance(handlers, ToolRegistry) else handlers
    results: List[ToolCall] = []
    for call in calls:
        handler = table.get(call.name)
        if handler is None:
            message = f"No handler registered for tool: {call.name}"
            log_event(_logger, "tool.missing", level=logging.WARNING, tool=call.name)
            results.append(ToolCall(input=call, output=ToolOutput(output=None, error=message)))
            continue
        try:
            value = handler(call.arguments)
            if inspect.isawaitable(value):
                value = await value
        except Exception as exc:  # noqa: BLE001 - recorded on the call result
            log_event(_logger, "tool.error", level=logging.ERROR, tool=call.name, error=str(exc))
            results.append(ToolCall(input=call, output=ToolOutput(output=None, error=str(exc))))
            continue
        results.append(ToolCall(input=call, output=ToolOutput(output=value)))
    return results


def format_tool_results(results: Sequence[ToolCall]) -> Dict[str, Any]:
    """Build the follow-up user message carrying one ``tool_result`` block per call."""
    blocks: List[Dict[str, Any]] = []
    for call in results:
        output = call.output or ToolOutput()
        block: Dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": call.input.tool_use_id or call.input.name,
        }
        if output.error is not None:
            block["content"] = output.error
            block["is_error"] = True
        else:
            value = output.output
            block["content"] = value if isinstance(value, str) else json.dumps(value, default=str)
        blocks.append(block)
    return {"role": "user", "content": blocks}


__all__ = [
    "ToolHandler",
    "ToolInput",
    "ToolOutput",
    "ToolCall",
    "ToolRegistry",
    "create_tool",
    "convert_to_sdk_tool",
    "extract_tool_calls",
    "execute_tool_calls",
    "format_tool_results",
]
