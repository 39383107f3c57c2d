"""Pydantic DTOs for settings and inbound chat requests."""

from .adapter_params import AdapterParams
from .settings import ChatModelSettings
from .chat import ChatRequestDTO, MessageDTO, ToolCallDTO, thread_from_chat_request

__all__ = [
    "AdapterParams",
    "ChatModelSettings",
    "ChatRequestDTO",
    "MessageDTO",
    "ToolCallDTO",
    "thread_from_chat_request",
]
