"""Tool specification DTO passed through to the provider's ``tools`` parameter."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union


@dataclass
class ToolSpec:
    """A tool the model may call.

    Attributes:
        name: Tool name, unique within one request.
        input_schema: JSON schema describing the tool arguments.
        description: Optional natural-language description.
    """

    name: str
    input_schema: Dict[str, Any] = field(default_factory=dict)
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "input_schema": dict(self.input_schema)}
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_value(cls, value: Union["ToolSpec", Mapping[str, Any]]) -> "ToolSpec":
        if isinstance(value, ToolSpec):
            return value
        schema = value.get("input_schema", value.get("inputSchema")) or {}
        return cls(name=value["name"], input_schema=dict(schema), description=value.get("description"))


__all__ = ["ToolSpec"]
