"""
Decoders for OpenAI-compatible responses and stream frames.

Complete responses carry ``choices[i].message``; stream frames carry
``choices[i].delta`` with text and tool-call fragments. Both decode into
:class:`CanonicalDelta`. Error bodies, in either position, become
:class:`VendorError`.
"""

from __future__ import annotations

import json
import typing as _t

from ..errors_parts.classification import vendor_error_from_body
from ..errors_parts.provider_error import DecodeError
from ..models_parts.canonical_delta import CanonicalDelta, ChoiceDelta, ToolCallDelta


def _decode_tool_calls(raw: _t.Any) -> tuple:
    calls = []
    for pos, call in enumerate(raw or []):
        if not isinstance(call, dict):
            continue
        fn = call.get("function") or {}
        args = fn.get("arguments")
        if isinstance(args, dict):
            args = json.dumps(args)
        calls.append(
            ToolCallDelta(
                index=int(call.get("index", pos)),
                id=call.get("id"),
                name=fn.get("name"),
                arguments=args or "",
            )
        )
    return tuple(calls)


def _text_of(content: _t.Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(p.get("text", "") for p in content if isinstance(p, dict) and p.get("type") == "text")
    return str(content)


def decode_completion(body: _t.Any, *, provider: str) -> CanonicalDelta:
    """Decode a non-streaming Chat Completions response."""
    if not isinstance(body, dict):
        raise DecodeError("response body is not a JSON object", provider=provider)
    if body.get("error"):
        raise vendor_error_from_body(None, body, provider=provider)
    raw_choices = body.get("choices")
    if not isinstance(raw_choices, list) or not raw_choices:
        raise DecodeError("response has no choices", provider=provider)
    choices = []
    for pos, choice in enumerate(raw_choices):
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            raise DecodeError(f"choice {pos} has no message", provider=provider)
        choices.append(
            ChoiceDelta(
                index=int(choice.get("index", pos)),
                text=_text_of(message.get("content")),
                tool_calls=_decode_tool_calls(message.get("tool_calls")),
                finish_reason=choice.get("finish_reason"),
            )
        )
    return CanonicalDelta(choices=tuple(choices), done=True, response_id=body.get("id"))


def decode_stream_frame(frame: _t.Any, *, provider: str) -> _t.Optional[CanonicalDelta]:
    """Decode one parsed SSE payload; ``None`` when it carries nothing."""
    if not isinstance(frame, dict):
        raise DecodeError("stream frame is not a JSON object", provider=provider)
    if frame.get("error"):
        raise vendor_error_from_body(None, frame, provider=provider)
    choices = []
    for pos, choice in enumerate(frame.get("choices") or []):
        delta = choice.get("delta") or {}
        cd = ChoiceDelta(
            index=int(choice.get("index", pos)),
            text=_text_of(delta.get("content")),
            tool_calls=_decode_tool_calls(delta.get("tool_calls")),
            finish_reason=choice.get("finish_reason"),
        )
        if not cd.is_empty:
            choices.append(cd)
    if not choices:
        return None
    return CanonicalDelta(choices=tuple(choices), response_id=frame.get("id"))


__all__ = ["decode_completion", "decode_stream_frame"]
