"""Line-level frame decoding for streamed vendor responses.

Two framings are in use: server-sent events (OpenAI family, Anthropic,
Gemini with ``alt=sse``) and newline-delimited JSON (Ollama, Cohere). The
transport yields one text line at a time; these helpers turn a line into the
decoded JSON object, ``DONE`` for the ``[DONE]`` sentinel, or ``None`` for
lines carrying no payload.
"""
from __future__ import annotations

import json
from typing import Any, Optional

from ..errors_parts.provider_error import DecodeError

DONE = object()
"""Sentinel returned for the SSE ``data: [DONE]`` terminator."""

_DONE_MARK = "[DONE]"


def _loads(text: str, provider: Optional[str]) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise DecodeError(f"invalid JSON frame: {text[:80]!r}", provider=provider) from exc


def parse_sse_line(line: Any, *, provider: Optional[str] = None) -> Any:
    """Decode one SSE line.

    Returns the JSON payload of a ``data:`` line, :data:`DONE` for the
    terminator, and ``None`` for blank lines, ``:`` comments (keep-alives),
    and ``event:``/``id:``/``retry:`` fields. Already-decoded dicts pass
    through unchanged.
    """
    if isinstance(line, dict):
        return line
    if isinstance(line, bytes):
        line = line.decode("utf-8")
    text = str(line).strip()
    if not text or text.startswith(":"):
        return None
    if not text.startswith("data:"):
        return None
    data = text[len("data:"):].strip()
    if not data:
        return None
    if data == _DONE_MARK:
        return DONE
    return _loads(data, provider)


def parse_ndjson_line(line: Any, *, provider: Optional[str] = None) -> Any:
    """Decode one NDJSON line; blank lines give ``None``."""
    if isinstance(line, dict):
        return line
    if isinstance(line, bytes):
        line = line.decode("utf-8")
    text = str(line).strip()
    if not text:
        return None
    return _loads(text, provider)


__all__ = ["DONE", "parse_sse_line", "parse_ndjson_line"]
