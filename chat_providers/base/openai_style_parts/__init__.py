"""OpenAI-compatible Chat Completions building blocks."""

from .base import OpenAIStyleAdapter
from .nonstream_helpers import decode_completion, decode_stream_frame
from .style_helpers import build_chat_params, encode_messages, encode_tool_choice, encode_tools

__all__ = [
    "OpenAIStyleAdapter",
    "build_chat_params",
    "encode_messages",
    "encode_tools",
    "encode_tool_choice",
    "decode_completion",
    "decode_stream_frame",
]
