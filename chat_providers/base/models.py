"""
Canonical chat model public surface.

This module re-exports the one-concept-per-file implementations under
``chat_providers.base.models_parts`` so callers have one stable import path.
"""

from .models_parts.content_part import (
    ImagePart,
    Part,
    TextPart,
    ToolCallPart,
    ToolResultPart,
    normalize_content,
    part_to_dict,
)
from .models_parts.message import Message, Role
from .models_parts.turn import Turn
from .models_parts.thread import Thread
from .models_parts.generation_config import GenerationConfig, ToolMode
from .models_parts.tool_declaration import ToolDeclaration
from .models_parts.canonical_delta import CanonicalDelta, ChoiceDelta, ToolCallDelta, text_delta

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
    "Turn",
    "Thread",
    "GenerationConfig",
    "ToolMode",
    "ToolDeclaration",
    "CanonicalDelta",
    "ChoiceDelta",
    "ToolCallDelta",
    "text_delta",
]
