"""
Pydantic DTOs for inbound ChatML-style requests.

Purpose
-------
Validate an OpenAI-style request dict (``messages``, sampling parameters,
``tools``) at the edge and convert it into a canonical :class:`Thread`.
Callers that already hold ChatML payloads use :func:`thread_from_chat_request`
instead of building turns by hand.

Failure modes
-------------
Pydantic validation failures are re-raised as the package
:class:`~chat_providers.base.errors.ValidationError` so callers catch one
taxonomy.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    model_validator,
)

from ..errors_parts.provider_error import ValidationError
from ..models_parts.content_part import TextPart, ToolCallPart, ToolResultPart, normalize_content
from ..models_parts.generation_config import GenerationConfig, ToolMode
from ..models_parts.message import Message
from ..models_parts.thread import Thread
from ..models_parts.tool_declaration import ToolDeclaration


Role = Literal["system", "user", "assistant", "tool"]


class ToolCallDTO(BaseModel):
    """OpenAI ``tool_calls`` entry on an assistant message."""

    id: Optional[str] = None
    type: Literal["function"] = "function"
    function: Dict[str, Any]


class MessageDTO(BaseModel):
    """A ChatML message: string content or a list of typed part dicts."""

    model_config = ConfigDict(extra="ignore")

    role: Role
    content: Union[str, List[Dict[str, Any]], None] = None
    tool_calls: Optional[List[ToolCallDTO]] = None
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def _validate_content(self) -> "MessageDTO":
        if self.content is None and not self.tool_calls:
            raise ValueError("message needs content or tool_calls")
        if self.role == "tool" and not self.tool_call_id:
            raise ValueError("tool message needs tool_call_id")
        return self


class ChatRequestDTO(BaseModel):
    """Validated ChatML request.

    Sampling parameters also accept the camelCase names Gemini-flavoured
    payloads use (``topK``, ``topP``, ``stopSequences``, ``maxOutputTokens``,
    ``candidateCount``).

    Raises:
        pydantic.ValidationError: on bad roles, empty message lists or
            out-of-range parameters.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    messages: List[MessageDTO] = Field(..., min_length=1)
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0, validation_alias=AliasChoices("top_p", "topP"))
    top_k: Optional[int] = Field(default=None, gt=0, validation_alias=AliasChoices("top_k", "topK"))
    max_tokens: Optional[int] = Field(
        default=None, gt=0, validation_alias=AliasChoices("max_tokens", "maxOutputTokens", "max_output_tokens")
    )
    stop: Union[str, List[str], None] = Field(
        default=None, validation_alias=AliasChoices("stop", "stopSequences", "stop_sequences")
    )
    n: Optional[int] = Field(default=None, gt=0, validation_alias=AliasChoices("n", "candidateCount", "candidate_count"))
    tools: Optional[List[Dict[str, Any]]] = None
    tool_choice: Union[str, Dict[str, Any], None] = None


def _tool_mode(choice: Union[str, Dict[str, Any], None]) -> Optional[ToolMode]:
    if choice is None:
        return None
    if isinstance(choice, dict):
        return ToolMode.REQUIRED
    if choice in ("any", "required"):
        return ToolMode.REQUIRED
    return ToolMode(choice)


def _message_from_dto(dto: MessageDTO) -> Message:
    if dto.role == "tool":
        text = dto.content if isinstance(dto.content, str) else "".join(
            p.text for p in normalize_content(dto.content or []) if isinstance(p, TextPart)
        )
        return Message("tool", [ToolResultPart(dto.tool_call_id or "", text, dto.name)])
    parts: List[Any] = list(normalize_content(dto.content)) if dto.content else []
    for call in dto.tool_calls or []:
        args = call.function.get("arguments") or {}
        if isinstance(args, str):
            try:
                args = json.loads(args) if args.strip() else {}
            except ValueError as exc:
                raise ValidationError("tool_call arguments are not valid JSON") from exc
        parts.append(ToolCallPart(name=str(call.function.get("name", "")), arguments=args, id=call.id))
    return Message(dto.role, parts)


def thread_from_chat_request(data: Mapping[str, Any], *, key: str = "thread") -> Thread:
    """Validate a ChatML request dict and build a :class:`Thread`.

    Each message becomes its own single-choice turn, in order.

    Raises:
        ValidationError: when the payload fails validation.
    """
    try:
        dto = ChatRequestDTO.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(f"invalid chat request: {exc}") from exc
    stops = [dto.stop] if isinstance(dto.stop, str) else list(dto.stop or [])
    try:
        config = GenerationConfig(
            temperature=dto.temperature,
            top_k=dto.top_k,
            top_p=dto.top_p,
            max_tokens=dto.max_tokens,
            stop_sequences=tuple(stops),
            n=dto.n,
            tool_mode=_tool_mode(dto.tool_choice),
        )
    except ValueError as exc:
        raise ValidationError(f"invalid tool_choice: {dto.tool_choice!r}") from exc
    thread = Thread(key=key, config=config, tools=tuple(ToolDeclaration.from_dict(t) for t in dto.tools or []))
    for message in dto.messages:
        thread.add_turn([_message_from_dto(message)])
    return thread


__all__ = ["ToolCallDTO", "MessageDTO", "ChatRequestDTO", "thread_from_chat_request"]
