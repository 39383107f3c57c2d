"""
Canonical response deltas.

Every adapter decodes vendor output into a `CanonicalDelta`. A complete
(non-streaming) response is one delta whose choices carry the full content; a
stream is a sequence of partial deltas merged by the stream assembler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ToolCallDelta:
    """A (possibly partial) tool call.

    ``arguments`` is a JSON text fragment; fragments for the same ``index``
    concatenate into the full argument object.
    """

    index: int = 0
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: str = ""


@dataclass(frozen=True)
class ChoiceDelta:
    """Incremental content for one choice (candidate) of a response."""

    index: int = 0
    role: str = "assistant"
    text: str = ""
    tool_calls: Tuple[ToolCallDelta, ...] = ()
    finish_reason: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.tool_calls and self.finish_reason is None


@dataclass(frozen=True)
class CanonicalDelta:
    """One decoded frame or response: choices plus an end-of-response flag."""

    choices: Tuple[ChoiceDelta, ...] = ()
    done: bool = False
    response_id: Optional[str] = None

    @property
    def text(self) -> str:
        """Text of choice 0 (convenience for single-choice callers)."""
        return "".join(c.text for c in self.choices if c.index == 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "done": self.done,
            "choices": [
                {
                    "index": c.index,
                    "role": c.role,
                    "text": c.text,
                    "finish_reason": c.finish_reason,
                    "tool_calls": [
                        {"index": t.index, "id": t.id, "name": t.name, "arguments": t.arguments}
                        for t in c.tool_calls
                    ],
                }
                for c in self.choices
            ],
        }


def text_delta(text: str, *, index: int = 0, finish_reason: Optional[str] = None) -> CanonicalDelta:
    """Build a single-choice text delta."""
    return CanonicalDelta(choices=(ChoiceDelta(index=index, text=text, finish_reason=finish_reason),))


DONE = CanonicalDelta(done=True)


__all__ = ["ToolCallDelta", "ChoiceDelta", "CanonicalDelta", "text_delta", "DONE"]
