"""
Canonical message used across adapters.

Defines the `Message` dataclass and the `Role` literal. Content is normalized
on construction, so every message holds an ordered tuple of parts regardless
of whether the caller supplied a flat string or structured parts.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Tuple

from ..errors_parts.provider_error import ValidationError
from .content_part import ImagePart, Part, TextPart, ToolCallPart, ToolResultPart, normalize_content


# Message roles used across adapters.
Role = Literal["system", "user", "assistant", "tool"]
ROLES: Tuple[str, ...] = ("system", "user", "assistant", "tool")


@dataclass(frozen=True)
class Message:
    """A role-tagged chat message at a ``(turn_index, choice_index)`` coordinate.

    Attributes:
        role: The role of the message author.
        content: Ordered tuple of parts (normalized from the constructor input).
        turn_index: Position of the owning turn within the thread.
        choice_index: Alternative completion index within the turn.
    """

    role: Role
    content: Tuple[Part, ...]
    turn_index: int = 0
    choice_index: int = 0

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValidationError(f"unknown role: {self.role!r}")
        object.__setattr__(self, "content", normalize_content(self.content))

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.content if isinstance(p, TextPart))

    @property
    def has_images(self) -> bool:
        return any(isinstance(p, ImagePart) for p in self.content)

    @property
    def tool_calls(self) -> List[ToolCallPart]:
        return [p for p in self.content if isinstance(p, ToolCallPart)]

    @property
    def tool_results(self) -> List[ToolResultPart]:
        return [p for p in self.content if isinstance(p, ToolResultPart)]

    def is_plain_text(self) -> bool:
        """Return True when the content is exactly one text part."""
        return len(self.content) == 1 and isinstance(self.content[0], TextPart)

    def at(self, turn_index: int, choice_index: int = 0) -> "Message":
        """Return a copy placed at a new coordinate."""
        return Message(self.role, self.content, turn_index, choice_index)

    @classmethod
    def of(cls, role: str, content: Any) -> "Message":
        """Shortcut used by callers and tests: ``Message.of("user", "hi")``."""
        return cls(role, content)  # type: ignore[arg-type]


__all__ = ["Message", "Role", "ROLES"]
