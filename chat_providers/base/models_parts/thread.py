"""
Conversation thread: ordered turns plus generation config and tools.

The thread is the unit the dispatcher sends. Its config and tool set are
immutable values swapped as a whole, so a request that snapshotted them at
start is never affected by later changes.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..errors_parts.provider_error import ValidationError
from .generation_config import GenerationConfig
from .message import Message
from .tool_declaration import ToolDeclaration
from .turn import Turn


@dataclass
class Thread:
    """An ordered sequence of turns for one conversation.

    Attributes:
        key: Caller-chosen identifier; used to build message keys.
        turns: Turns in conversation order.
        config: Frozen generation parameters for the next request.
        tools: Tool declarations offered on the next request.
    """

    key: str
    turns: List[Turn] = field(default_factory=list)
    config: GenerationConfig = field(default_factory=GenerationConfig)
    tools: Tuple[ToolDeclaration, ...] = ()

    def __post_init__(self) -> None:
        self.tools = tuple(
            t if isinstance(t, ToolDeclaration) else ToolDeclaration.from_dict(t) for t in self.tools
        )

    def add_message(self, role: str, content: Any) -> Message:
        """Append a single-choice turn holding one message."""
        return self.add_turn([Message(role, content)]).selected  # type: ignore[arg-type]

    def add_turn(self, messages: Sequence[Message]) -> Turn:
        """Append a turn built from ``messages`` (one per choice index)."""
        if not messages:
            raise ValidationError("a turn needs at least one message")
        turn = Turn(turn_index=len(self.turns), role=messages[0].role)
        for msg in messages:
            turn.add(msg)
        self.turns.append(turn)
        return turn

    def messages(self) -> List[Message]:
        """Selected message of every turn, in order."""
        return [t.selected for t in self.turns]

    def message_key(self, turn_index: int, choice_index: int = 0) -> str:
        """Stable key for a message coordinate: ``"<thread>#<turn>{<choice>}"``."""
        return f"{self.key}#{turn_index}{{{choice_index}}}"

    def get(self, turn_index: int, choice_index: Optional[int] = None) -> Message:
        turn = self.turns[turn_index]
        return turn.selected if choice_index is None else turn.choices[choice_index]

    def with_config(self, **changes: Any) -> GenerationConfig:
        """Replace the thread config with a copy carrying ``changes``."""
        self.config = replace(self.config, **changes)
        return self.config

    def set_tools(self, tools: Iterable[Any]) -> None:
        self.tools = tuple(
            t if isinstance(t, ToolDeclaration) else ToolDeclaration.from_dict(t) for t in tools
        )


__all__ = ["Thread"]
