"""A single role's contribution at one position in a thread."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..errors_parts.provider_error import ValidationError
from .message import Message, Role


@dataclass
class Turn:
    """Messages sharing one role at one ``turn_index``, keyed by choice.

    Multiple choices are alternative completions for the same turn;
    ``selected_choice`` picks the one sent back on the next request.
    """

    turn_index: int
    role: Role
    choices: Dict[int, Message] = field(default_factory=dict)
    selected_choice: int = 0

    def add(self, message: Message) -> Message:
        """Add ``message`` as a choice, re-coordinating it to this turn."""
        if message.role != self.role:
            raise ValidationError(
                f"turn {self.turn_index} holds role {self.role!r}, got {message.role!r}"
            )
        if message.choice_index in self.choices:
            raise ValidationError(
                f"choice {message.choice_index} already present in turn {self.turn_index}"
            )
        placed = message.at(self.turn_index, message.choice_index)
        self.choices[placed.choice_index] = placed
        return placed

    def select(self, choice_index: int) -> None:
        if choice_index not in self.choices:
            raise ValidationError(f"turn {self.turn_index} has no choice {choice_index}")
        self.selected_choice = choice_index

    @property
    def selected(self) -> Message:
        if self.selected_choice in self.choices:
            return self.choices[self.selected_choice]
        return self.choices[min(self.choices)]

    @property
    def messages(self) -> List[Message]:
        return [self.choices[i] for i in sorted(self.choices)]


__all__ = ["Turn"]
