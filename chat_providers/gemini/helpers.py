"""Gemini wire helpers: role table, content encoding, generation config.

Kept apart from the adapter class so each mapping table is testable alone.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..base.errors_parts.provider_error import ValidationError
from ..base.models_parts.content_part import ImagePart, TextPart, ToolCallPart, ToolResultPart
from ..base.models_parts.generation_config import GenerationConfig, ToolMode
from ..base.models_parts.message import Message
from ..base.models_parts.tool_declaration import ToolDeclaration

CONTEXT_OPEN = "---BEGIN IMPORTANT CONTEXT---"
CONTEXT_CLOSE = "---END IMPORTANT CONTEXT---"

ROLE_TO_GEMINI: Dict[str, str] = {"user": "user", "assistant": "model"}
ROLE_FROM_GEMINI: Dict[str, str] = {"user": "user", "model": "assistant"}

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
DEFAULT_SAFETY_THRESHOLD = "BLOCK_NONE"
SAFETY_THRESHOLDS = (
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
)

# Generation config defaults owned by this adapter.
DEFAULT_TOP_K = 1
DEFAULT_TOP_P = 1
DEFAULT_MAX_OUTPUT_TOKENS = 2048
DEFAULT_CANDIDATE_COUNT = 1

FINISH_REASONS: Dict[str, str] = {
    "STOP": "stop",
    "MAX_TOKENS": "length",
    "SAFETY": "content_filter",
    "RECITATION": "content_filter",
    "BLOCKLIST": "content_filter",
    "PROHIBITED_CONTENT": "content_filter",
}


class FunctionCallingMode(str, Enum):
    """``tool_config.function_calling_config.mode`` values."""

    ANY = "ANY"
    AUTO = "AUTO"
    NONE = "NONE"


def to_gemini_role(role: str) -> str:
    try:
        return ROLE_TO_GEMINI[role]
    except KeyError as exc:
        raise ValidationError(f"role {role!r} has no Gemini content role") from exc


def from_gemini_role(role: Optional[str]) -> str:
    return ROLE_FROM_GEMINI.get(role or "model", "assistant")


def function_calling_mode(mode: Optional[ToolMode]) -> FunctionCallingMode:
    if mode is ToolMode.AUTO:
        return FunctionCallingMode.AUTO
    if mode is ToolMode.NONE:
        return FunctionCallingMode.NONE
    return FunctionCallingMode.ANY


def context_block(text: str) -> str:
    return f"{CONTEXT_OPEN}\n{text}\n{CONTEXT_CLOSE}"


def safety_settings(threshold: str = DEFAULT_SAFETY_THRESHOLD) -> List[Dict[str, str]]:
    return [{"category": c, "threshold": threshold} for c in SAFETY_CATEGORIES]


def generation_config(config: GenerationConfig) -> Dict[str, Any]:
    """Map the canonical config; temperature is omitted when unset."""
    out: Dict[str, Any] = {}
    if config.temperature is not None:
        out["temperature"] = config.temperature
    out["topK"] = config.top_k if config.top_k is not None else DEFAULT_TOP_K
    out["topP"] = config.top_p if config.top_p is not None else DEFAULT_TOP_P
    out["maxOutputTokens"] = config.max_tokens if config.max_tokens is not None else DEFAULT_MAX_OUTPUT_TOKENS
    out["stopSequences"] = list(config.stop_sequences)
    out["candidate_count"] = config.n if config.n is not None else DEFAULT_CANDIDATE_COUNT
    return out


def _image_part(part: ImagePart) -> Dict[str, Any]:
    if part.is_data_url:
        mime, data = part.split_data_url()
        return {"inline_data": {"mime_type": mime, "data": data}}
    return {"file_data": {"file_uri": part.url}}


def encode_parts(message: Message, call_names: Dict[str, str]) -> List[Dict[str, Any]]:
    """Encode one message's parts in order."""
    parts: List[Dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, TextPart):
            parts.append({"text": part.text})
        elif isinstance(part, ImagePart):
            parts.append(_image_part(part))
        elif isinstance(part, ToolCallPart):
            parts.append({"functionCall": {"name": part.name, "args": dict(part.arguments)}})
        elif isinstance(part, ToolResultPart):
            name = part.name or call_names.get(part.call_id)
            if not name:
                raise ValidationError(f"tool result {part.call_id!r} has no matching tool call name")
            try:
                response = json.loads(part.content)
            except ValueError:
                response = None
            if not isinstance(response, dict):
                response = {"content": part.content}
            parts.append({"functionResponse": {"name": name, "response": response}})
    return parts


def prepend_text(parts: List[Dict[str, Any]], prefix: str) -> None:
    """Prefix the first text part, inserting one when there is none."""
    for part in parts:
        if "text" in part:
            part["text"] = prefix + part["text"]
            return
    parts.insert(0, {"text": prefix.rstrip("\n")})


def append_text(parts: List[Dict[str, Any]], suffix: str) -> None:
    """Suffix the last text part, appending one when there is none."""
    for part in reversed(parts):
        if "text" in part:
            part["text"] = part["text"] + suffix
            return
    parts.append({"text": suffix.lstrip("\n")})


def encode_tools(tools: Sequence[ToolDeclaration]) -> List[Dict[str, Any]]:
    return [{"function_declarations": [t.to_dict() for t in tools]}]


def tool_call_names(messages: Sequence[Message]) -> Dict[str, str]:
    """Map tool call ids to names so results can be sent by function name."""
    return {c.id: c.name for m in messages for c in m.tool_calls if c.id}


__all__ = [
    "CONTEXT_OPEN",
    "CONTEXT_CLOSE",
    "FunctionCallingMode",
    "SAFETY_CATEGORIES",
    "SAFETY_THRESHOLDS",
    "DEFAULT_SAFETY_THRESHOLD",
    "FINISH_REASONS",
    "to_gemini_role",
    "from_gemini_role",
    "function_calling_mode",
    "context_block",
    "safety_settings",
    "generation_config",
    "encode_parts",
    "encode_tools",
    "prepend_text",
    "append_text",
    "tool_call_names",
]
