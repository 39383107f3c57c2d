"""Canonical model parts (one concept per module)."""

from .content_part import (
    ImagePart,
    Part,
    TextPart,
    ToolCallPart,
    ToolResultPart,
    normalize_content,
    part_to_dict,
)
from .message import Message, Role, ROLES
from .turn import Turn
from .thread import Thread
from .generation_config import GenerationConfig, ToolMode
from .tool_declaration import ToolDeclaration
from .canonical_delta import CanonicalDelta, ChoiceDelta, ToolCallDelta, text_delta, DONE

__all__ = [
    "TextPart",
    "ImagePart",
    "ToolCallPart",
    "ToolResultPart",
    "Part",
    "normalize_content",
    "part_to_dict",
    "Message",
    "Role",
    "ROLES",
    "Turn",
    "Thread",
    "GenerationConfig",
    "ToolMode",
    "ToolDeclaration",
    "CanonicalDelta",
    "ChoiceDelta",
    "ToolCallDelta",
    "text_delta",
    "DONE",
]
