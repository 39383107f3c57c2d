"""
Generation parameters and the canonical tool-use mode.

`GenerationConfig` is frozen: a thread swaps in a new instance through
``with_config`` instead of mutating one that an in-flight request may be
translating. Every field is optional; adapters own their defaults.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from ..errors_parts.provider_error import ValidationError


class ToolMode(str, Enum):
    """How strongly the model is asked to call a declared tool."""

    AUTO = "auto"
    REQUIRED = "required"
    NONE = "none"


def _dedupe(values: Iterable[str]) -> Tuple[str, ...]:
    seen = []
    for v in values:
        if not isinstance(v, str):
            raise ValidationError(f"stop sequence must be a string, got {type(v).__name__}")
        if v not in seen:
            seen.append(v)
    return tuple(seen)


@dataclass(frozen=True)
class GenerationConfig:
    """Conversation-scoped sampling parameters."""

    temperature: Optional[float] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    stop_sequences: Tuple[str, ...] = ()
    n: Optional[int] = None
    tool_mode: Optional[ToolMode] = None

    def __post_init__(self) -> None:
        stops = self.stop_sequences
        if isinstance(stops, str):
            stops = (stops,)
        object.__setattr__(self, "stop_sequences", _dedupe(stops or ()))
        if self.tool_mode is not None and not isinstance(self.tool_mode, ToolMode):
            try:
                object.__setattr__(self, "tool_mode", ToolMode(str(self.tool_mode).lower()))
            except ValueError as exc:
                raise ValidationError(f"unknown tool mode: {self.tool_mode!r}") from exc
        if self.n is not None and self.n < 1:
            raise ValidationError("n must be >= 1")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ValidationError("max_tokens must be >= 1")

    @property
    def choice_count(self) -> int:
        return self.n or 1

    def merged(self, **changes: Any) -> "GenerationConfig":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


__all__ = ["GenerationConfig", "ToolMode"]
