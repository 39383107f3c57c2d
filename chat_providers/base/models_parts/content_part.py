"""
Canonical content parts and content normalization.

A message's content is always held as an ordered tuple of tagged parts. Callers
may hand in a flat string, a sequence of parts, or ChatML-style part dicts;
:func:`normalize_content` collapses all of them into the one shape every
adapter consumes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Tuple, Union

from ..errors_parts.provider_error import ValidationError


PartType = Literal["text", "image", "tool_call", "tool_result"]


@dataclass(frozen=True)
class TextPart:
    """Plain text content."""

    text: str
    type: PartType = field(default="text", init=False)


@dataclass(frozen=True)
class ImagePart:
    """An image referenced by URL (``https://...`` or a ``data:`` URL)."""

    url: str
    type: PartType = field(default="image", init=False)

    @property
    def is_data_url(self) -> bool:
        return self.url.startswith("data:")

    def split_data_url(self) -> Tuple[str, str]:
        """Return ``(mime_type, base64_payload)`` for a ``data:`` URL.

        Raises:
            ValidationError: when the URL is not a base64 data URL.
        """
        if not self.is_data_url or ";base64," not in self.url:
            raise ValidationError(f"image is not a base64 data URL: {self.url[:40]!r}")
        header, payload = self.url.split(",", 1)
        mime = header[len("data:"):].split(";", 1)[0] or "application/octet-stream"
        return mime, payload


@dataclass(frozen=True)
class ToolCallPart:
    """A tool invocation requested by the assistant.

    ``arguments`` is the decoded JSON object the model produced.
    """

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)
    id: Optional[str] = None
    type: PartType = field(default="tool_call", init=False)


@dataclass(frozen=True)
class ToolResultPart:
    """The result of a tool invocation, sent back with role ``tool``."""

    call_id: str
    content: str
    name: Optional[str] = None
    type: PartType = field(default="tool_result", init=False)


Part = Union[TextPart, ImagePart, ToolCallPart, ToolResultPart]
_PART_TYPES = (TextPart, ImagePart, ToolCallPart, ToolResultPart)

Content = Union[str, Sequence[Union[Part, Mapping[str, Any]]]]


def _part_from_dict(item: Mapping[str, Any]) -> Part:
    kind = item.get("type")
    if kind == "text" and isinstance(item.get("text"), str):
        return TextPart(item["text"])
    if kind in ("image_url", "image"):
        ref = item.get("image_url", item.get("url"))
        url = ref.get("url") if isinstance(ref, Mapping) else ref
        if isinstance(url, str):
            return ImagePart(url)
    if kind == "tool_call" and isinstance(item.get("name"), str):
        args = item.get("arguments") or {}
        if not isinstance(args, Mapping):
            raise ValidationError("tool_call arguments must be an object")
        return ToolCallPart(item["name"], dict(args), item.get("id"))
    if kind == "tool_result" and isinstance(item.get("call_id"), str):
        return ToolResultPart(item["call_id"], str(item.get("content", "")), item.get("name"))
    raise ValidationError(f"unrecognized content part: {dict(item)!r}")


def normalize_content(content: Any) -> Tuple[Part, ...]:
    """Normalize message content to an ordered tuple of parts.

    A string becomes a single :class:`TextPart`; a sequence keeps its order,
    with ChatML dicts converted to parts. The result is a fixed point:
    normalizing it again returns an equal tuple.

    Raises:
        ValidationError: when content is neither a string nor a sequence of
            recognizable parts.
    """
    if isinstance(content, str):
        return (TextPart(content),)
    if isinstance(content, (bytes, bytearray, Mapping)) or not isinstance(content, Sequence):
        raise ValidationError(f"content must be a string or a sequence of parts, got {type(content).__name__}")
    parts = []
    for item in content:
        if isinstance(item, _PART_TYPES):
            parts.append(item)
        elif isinstance(item, Mapping):
            parts.append(_part_from_dict(item))
        elif isinstance(item, str):
            parts.append(TextPart(item))
        else:
            raise ValidationError(f"unsupported content part type: {type(item).__name__}")
    return tuple(parts)


def part_to_dict(part: Part) -> Dict[str, Any]:
    """Return a JSON-serializable view of a part (for logging and debugging)."""
    if isinstance(part, TextPart):
        return {"type": "text", "text": part.text}
    if isinstance(part, ImagePart):
        return {"type": "image", "url": part.url}
    if isinstance(part, ToolCallPart):
        return {"type": "tool_call", "id": part.id, "name": part.name, "arguments": dict(part.arguments)}
    return {"type": "tool_result", "call_id": part.call_id, "name": part.name, "content": part.content}


__all__ = [
    "PartType",
    "TextPart",
    "ImagePart",
    "ToolCallPart",
    "ToolResultPart",
    "Part",
    "Content",
    "normalize_content",
    "part_to_dict",
]
