"""Internal state holder for cancellation tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class State:
    """Cancellation flag plus the reason supplied at cancel time."""

    cancelled: bool = False
    reason: Optional[str] = None


__all__ = ["State"]
