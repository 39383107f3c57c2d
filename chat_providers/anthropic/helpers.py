"""Anthropic Messages API mapping helpers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..base.errors_parts.provider_error import ValidationError
from ..base.models_parts.content_part import ImagePart, TextPart, ToolCallPart, ToolResultPart
from ..base.models_parts.generation_config import ToolMode
from ..base.models_parts.message import Message
from ..base.models_parts.tool_declaration import ToolDeclaration

DEFAULT_MAX_TOKENS = 4096

STOP_REASONS: Dict[str, str] = {
    "end_turn": "stop",
    "stop_sequence": "stop",
    "max_tokens": "length",
    "tool_use": "tool_calls",
}


def _image_block(part: ImagePart) -> Dict[str, Any]:
    if part.is_data_url:
        mime, data = part.split_data_url()
        return {"type": "image", "source": {"type": "base64", "media_type": mime, "data": data}}
    return {"type": "image", "source": {"type": "url", "url": part.url}}


def encode_blocks(message: Message) -> List[Dict[str, Any]]:
    blocks: List[Dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, TextPart):
            if part.text:
                blocks.append({"type": "text", "text": part.text})
        elif isinstance(part, ImagePart):
            blocks.append(_image_block(part))
        elif isinstance(part, ToolCallPart):
            if not part.id:
                raise ValidationError("anthropic tool_use blocks need a tool call id")
            blocks.append({"type": "tool_use", "id": part.id, "name": part.name, "input": dict(part.arguments)})
        elif isinstance(part, ToolResultPart):
            blocks.append({"type": "tool_result", "tool_use_id": part.call_id, "content": part.content})
    return blocks


def split_system(messages: Sequence[Message]) -> tuple[Optional[str], List[Message]]:
    """Concatenate every system message (blank-line separated) and return the rest."""
    system = [m.text for m in messages if m.role == "system"]
    rest = [m for m in messages if m.role != "system"]
    return ("\n\n".join(system) if system else None), rest


def encode_messages(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    """Encode non-system messages, merging consecutive same-role turns.

    Tool results travel as ``user`` content, so a tool message following a
    user message merges into it.
    """
    out: List[Dict[str, Any]] = []
    for message in messages:
        role = "user" if message.role == "tool" else message.role
        blocks = encode_blocks(message)
        if not blocks:
            continue
        if out and out[-1]["role"] == role:
            out[-1]["content"].extend(blocks)
        else:
            out.append({"role": role, "content": blocks})
    return out


def encode_tools(tools: Sequence[ToolDeclaration]) -> List[Dict[str, Any]]:
    return [{"name": t.name, "description": t.description, "input_schema": dict(t.parameters)} for t in tools]


def encode_tool_choice(tools: Sequence[ToolDeclaration], mode: Optional[ToolMode]) -> Dict[str, Any]:
    if mode is ToolMode.AUTO:
        return {"type": "auto"}
    if mode is ToolMode.NONE:
        return {"type": "none"}
    if len(tools) == 1:
        return {"type": "tool", "name": tools[0].name}
    return {"type": "any"}


__all__ = [
    "DEFAULT_MAX_TOKENS",
    "STOP_REASONS",
    "encode_blocks",
    "split_system",
    "encode_messages",
    "encode_tools",
    "encode_tool_choice",
]
