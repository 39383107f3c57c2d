"""Tool (function) declaration offered to the model."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..errors_parts.provider_error import ValidationError


@dataclass(frozen=True)
class ToolDeclaration:
    """A callable tool: name, description and a JSON-schema-like parameter object."""

    name: str
    description: str = ""
    parameters: Mapping[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    def __post_init__(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise ValidationError("tool name must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolDeclaration":
        """Build from ``{name, description, parameters}`` or the OpenAI
        ``{"type": "function", "function": {...}}`` envelope."""
        if data.get("type") == "function" and isinstance(data.get("function"), Mapping):
            data = data["function"]
        name = data.get("name")
        if not isinstance(name, str):
            raise ValidationError(f"tool declaration missing name: {dict(data)!r}")
        params = data.get("parameters") or {"type": "object", "properties": {}}
        return cls(name=name, description=str(data.get("description") or ""), parameters=dict(params))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "parameters": dict(self.parameters)}


__all__ = ["ToolDeclaration"]
