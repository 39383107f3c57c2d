"""Cohere Chat v1 mapping helpers."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from ..base.models_parts.message import Message
from ..base.models_parts.tool_declaration import ToolDeclaration

ROLE_TO_COHERE: Dict[str, str] = {"user": "USER", "assistant": "CHATBOT", "system": "SYSTEM", "tool": "TOOL"}

# JSON schema type -> Cohere parameter_definitions type.
SCHEMA_TYPES: Dict[str, str] = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "array": "List",
    "object": "Dict",
}

FINISH_REASONS: Dict[str, str] = {
    "COMPLETE": "stop",
    "STOP_SEQUENCE": "stop",
    "MAX_TOKENS": "length",
    "ERROR_TOXIC": "content_filter",
}


def parameter_definitions(schema: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Flatten a JSON-schema object into Cohere ``parameter_definitions``."""
    required = set(schema.get("required") or ())
    out: Dict[str, Dict[str, Any]] = {}
    for pname, prop in (schema.get("properties") or {}).items():
        ptype = prop.get("type", "string")
        entry: Dict[str, Any] = {"type": SCHEMA_TYPES.get(ptype, ptype), "required": pname in required}
        if prop.get("description"):
            entry["description"] = prop["description"]
        out[pname] = entry
    return out


def encode_tools(tools: Sequence[ToolDeclaration]) -> List[Dict[str, Any]]:
    return [
        {
            "name": t.name,
            "description": t.description,
            "parameter_definitions": parameter_definitions(t.parameters),
        }
        for t in tools
    ]


def encode_tool_results(messages: Sequence[Message], calls: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Pair each tool result with the call that produced it."""
    out = []
    for message in messages:
        for result in message.tool_results:
            call = calls.get(result.call_id) or {"name": result.name or "", "parameters": {}}
            out.append({"call": call, "outputs": [{"result": result.content}]})
    return out


def history_entry(message: Message, calls: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    role = ROLE_TO_COHERE[message.role]
    if message.role == "tool":
        return {"role": role, "tool_results": encode_tool_results([message], calls)}
    entry: Dict[str, Any] = {"role": role, "message": message.text}
    if message.tool_calls:
        entry["tool_calls"] = [{"name": c.name, "parameters": dict(c.arguments)} for c in message.tool_calls]
    return entry


__all__ = [
    "ROLE_TO_COHERE",
    "SCHEMA_TYPES",
    "FINISH_REASONS",
    "parameter_definitions",
    "encode_tools",
    "encode_tool_results",
    "history_entry",
]
