"""Capability enumeration and request requirement checks.

Adapters advertise a frozen set of :class:`Capability` values. The dispatcher
derives what a request needs with :func:`required_capabilities` and calls
:func:`ensure_supported` before any network I/O, so a request the active
vendor cannot satisfy fails fast instead of silently dropping content.
Streaming is the one capability that degrades: a vendor without it answers
the same request in a single non-streaming call.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Iterable, Sequence

from ..errors_parts.provider_error import UnsupportedCapabilityError
from ..models_parts.generation_config import GenerationConfig
from ..models_parts.message import Message
from ..models_parts.tool_declaration import ToolDeclaration


class Capability(str, Enum):
    """Named features an adapter may support."""

    TOOLS = "tools"
    IMAGES = "images"
    STREAMING = "streaming"
    MULTIPLE_CHOICES = "multiple_choices"


# Capabilities whose absence is an error rather than a downgrade.
STRICT_CAPABILITIES: FrozenSet[Capability] = frozenset(
    {Capability.TOOLS, Capability.IMAGES, Capability.MULTIPLE_CHOICES}
)


def required_capabilities(
    messages: Sequence[Message],
    config: GenerationConfig,
    tools: Sequence[ToolDeclaration],
    *,
    stream: bool = False,
) -> FrozenSet[Capability]:
    """Return the capabilities a request built from these inputs needs."""
    needed = set()
    if tools or any(m.tool_calls or m.tool_results for m in messages):
        needed.add(Capability.TOOLS)
    if any(m.has_images for m in messages):
        needed.add(Capability.IMAGES)
    if config.choice_count > 1:
        needed.add(Capability.MULTIPLE_CHOICES)
    if stream:
        needed.add(Capability.STREAMING)
    return frozenset(needed)


def ensure_supported(
    required: Iterable[Capability],
    available: FrozenSet[Capability],
    *,
    provider: str | None = None,
) -> None:
    """Raise :class:`UnsupportedCapabilityError` for the first missing strict capability.

    Checked in enum order so the error is deterministic.
    """
    required = set(required)
    for cap in Capability:
        if cap in required and cap in STRICT_CAPABILITIES and cap not in available:
            raise UnsupportedCapabilityError(
                f"adapter does not support {cap.value}", provider=provider, capability=cap
            )


__all__ = ["Capability", "STRICT_CAPABILITIES", "required_capabilities", "ensure_supported"]
