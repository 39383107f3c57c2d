"""
Request builders for OpenAI-compatible Chat Completions adapters.

Purpose:
- Translate canonical messages, generation config and tools into the
  Chat Completions request shape shared by OpenAI, Azure, OpenRouter, Groq,
  xAI, LM Studio and user-defined compatible endpoints.

Mapping rules:
- System messages pass through unmodified (the wire supports many).
- Plain-text content is sent as a string; anything else as a typed content
  array (``text`` and ``image_url`` parts) in original order.
- Assistant tool calls become ``tool_calls`` with JSON-encoded arguments;
  tool results become ``role: tool`` messages keyed by ``tool_call_id``.
"""

from __future__ import annotations

import json
import typing as _t

from ..errors_parts.provider_error import ValidationError
from ..models_parts.content_part import ImagePart, TextPart, ToolCallPart, ToolResultPart
from ..models_parts.generation_config import GenerationConfig, ToolMode
from ..models_parts.message import Message
from ..models_parts.tool_declaration import ToolDeclaration


def encode_content(message: Message) -> _t.Union[str, list]:
    """Return string content for plain text, otherwise a typed part list."""
    if message.is_plain_text():
        return message.text
    parts: list = []
    for part in message.content:
        if isinstance(part, TextPart):
            parts.append({"type": "text", "text": part.text})
        elif isinstance(part, ImagePart):
            parts.append({"type": "image_url", "image_url": {"url": part.url}})
    return parts


def encode_tool_call(part: ToolCallPart, index: int) -> dict:
    return {
        "id": part.id or f"call_{index}",
        "type": "function",
        "function": {"name": part.name, "arguments": json.dumps(dict(part.arguments), ensure_ascii=False)},
    }


def encode_messages(messages: _t.Sequence[Message]) -> list[dict]:
    """Encode canonical messages in order.

    A tool message carrying several results expands to one ``tool`` entry per
    result.
    """
    out: list[dict] = []
    for message in messages:
        if message.role == "tool":
            results = message.tool_results
            if not results:
                raise ValidationError("tool message carries no tool result")
            for result in results:
                out.append({"role": "tool", "tool_call_id": result.call_id, "content": result.content})
            continue
        entry: dict = {"role": message.role}
        calls = message.tool_calls
        if calls and message.role == "assistant":
            text = message.text
            entry["content"] = text or None
            entry["tool_calls"] = [encode_tool_call(c, i) for i, c in enumerate(calls)]
        else:
            entry["content"] = encode_content(message)
        out.append(entry)
    return out


def encode_tools(tools: _t.Sequence[ToolDeclaration]) -> list[dict]:
    return [
        {
            "type": "function",
            "function": {"name": t.name, "description": t.description, "parameters": dict(t.parameters)},
        }
        for t in tools
    ]


def encode_tool_choice(tools: _t.Sequence[ToolDeclaration], mode: _t.Optional[ToolMode]) -> _t.Union[str, dict]:
    """Map the canonical tool mode to ``tool_choice``.

    With no explicit mode tools are forced: a single tool is named, several
    tools use ``"required"``.
    """
    if mode is ToolMode.NONE:
        return "none"
    if mode is ToolMode.AUTO:
        return "auto"
    if len(tools) == 1:
        return {"type": "function", "function": {"name": tools[0].name}}
    return "required"


def build_chat_params(
    model: _t.Optional[str],
    messages: _t.Sequence[Message],
    config: GenerationConfig,
    tools: _t.Sequence[ToolDeclaration],
    *,
    stream: bool,
    include_model: bool = True,
    supports_n: bool = True,
    supports_top_k: bool = False,
) -> dict:
    """Assemble a Chat Completions payload; absent config fields are omitted."""
    params: dict = {}
    if include_model and model:
        params["model"] = model
    params["messages"] = encode_messages(messages)
    if config.temperature is not None:
        params["temperature"] = float(config.temperature)
    if config.top_p is not None:
        params["top_p"] = float(config.top_p)
    if supports_top_k and config.top_k is not None:
        params["top_k"] = int(config.top_k)
    if config.max_tokens is not None:
        params["max_tokens"] = int(config.max_tokens)
    if config.stop_sequences:
        params["stop"] = list(config.stop_sequences)
    if supports_n and config.n is not None:
        params["n"] = int(config.n)
    if tools:
        params["tools"] = encode_tools(tools)
        params["tool_choice"] = encode_tool_choice(tools, config.tool_mode)
    if stream:
        params["stream"] = True
    return params


__all__ = [
    "encode_content",
    "encode_messages",
    "encode_tool_call",
    "encode_tools",
    "encode_tool_choice",
    "build_chat_params",
]
