"""Merge canonical deltas into completed messages.

Streams deliver text and tool-call argument fragments across many deltas.
:class:`StreamAssembler` accumulates them per choice index (and per tool
index within a choice) in arrival order, then builds one :class:`Message`
per choice. Complete responses go through the same path as a single delta.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..errors_parts.provider_error import DecodeError
from ..models_parts.canonical_delta import CanonicalDelta, ChoiceDelta
from ..models_parts.content_part import Part, TextPart, ToolCallPart
from ..models_parts.message import Message


@dataclass
class _ToolCallBuffer:
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: List[str] = field(default_factory=list)


@dataclass
class _ChoiceBuffer:
    role: str = "assistant"
    text: List[str] = field(default_factory=list)
    tools: Dict[int, _ToolCallBuffer] = field(default_factory=dict)
    finish_reason: Optional[str] = None


class StreamAssembler:
    """Accumulates deltas for one response."""

    def __init__(self, *, provider: Optional[str] = None) -> None:
        self._provider = provider
        self._choices: Dict[int, _ChoiceBuffer] = {}
        self.done = False

    def add(self, delta: CanonicalDelta) -> None:
        for choice in delta.choices:
            self._add_choice(choice)
        if delta.done:
            self.done = True

    def extend(self, deltas: Iterable[CanonicalDelta]) -> "StreamAssembler":
        for delta in deltas:
            self.add(delta)
        return self

    def _add_choice(self, choice: ChoiceDelta) -> None:
        buf = self._choices.setdefault(choice.index, _ChoiceBuffer(role=choice.role))
        if choice.text:
            buf.text.append(choice.text)
        for call in choice.tool_calls:
            tbuf = buf.tools.setdefault(call.index, _ToolCallBuffer())
            if call.id:
                tbuf.id = call.id
            if call.name:
                tbuf.name = call.name
            if call.arguments:
                tbuf.arguments.append(call.arguments)
        if choice.finish_reason:
            buf.finish_reason = choice.finish_reason

    @property
    def choice_indices(self) -> List[int]:
        return sorted(self._choices)

    def finish_reason(self, index: int = 0) -> Optional[str]:
        buf = self._choices.get(index)
        return buf.finish_reason if buf else None

    def text(self, index: int = 0) -> str:
        buf = self._choices.get(index)
        return "".join(buf.text) if buf else ""

    def _build_parts(self, buf: _ChoiceBuffer) -> List[Part]:
        parts: List[Part] = []
        text = "".join(buf.text)
        if text or not buf.tools:
            parts.append(TextPart(text))
        for tindex in sorted(buf.tools):
            tbuf = buf.tools[tindex]
            if not tbuf.name:
                raise DecodeError(f"tool call {tindex} has no name", provider=self._provider)
            raw = "".join(tbuf.arguments).strip()
            try:
                args = json.loads(raw) if raw else {}
            except ValueError as exc:
                raise DecodeError(
                    f"tool call {tbuf.name!r} arguments are not valid JSON", provider=self._provider
                ) from exc
            if not isinstance(args, dict):
                raise DecodeError(f"tool call {tbuf.name!r} arguments must be an object", provider=self._provider)
            parts.append(ToolCallPart(name=tbuf.name, arguments=args, id=tbuf.id))
        return parts

    def messages(self, turn_index: int = 0) -> List[Message]:
        """Build one message per choice, ordered by choice index.

        Raises:
            DecodeError: when accumulated tool-call arguments are not a JSON object.
        """
        out: List[Message] = []
        for index in self.choice_indices:
            buf = self._choices[index]
            out.append(Message("assistant", self._build_parts(buf), turn_index, index))
        return out


def assemble(deltas: Iterable[CanonicalDelta], *, turn_index: int = 0) -> List[Message]:
    """Shortcut: merge ``deltas`` and return the resulting messages."""
    return StreamAssembler().extend(deltas).messages(turn_index)


__all__ = ["StreamAssembler", "assemble"]
