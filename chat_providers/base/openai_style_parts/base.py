"""OpenAIStyleAdapter: shared Chat Completions translation.

Purpose:
- One implementation of the Chat Completions wire used by every
  OpenAI-compatible vendor. Subclasses adjust the endpoint, authentication
  header, and a few parameter switches (``SUPPORTS_N``, ``SUPPORTS_TOP_K``,
  ``INCLUDE_MODEL``).

Streaming:
- SSE ``data:`` frames; ``data: [DONE]`` ends the stream; ``:`` comment
  lines (keep-alives) and empty lines decode to ``None``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..adapter import ChatAdapter
from ..capabilities import Capability
from ..errors_parts.provider_error import ConfigurationError
from ..models_parts.canonical_delta import CanonicalDelta
from ..models_parts.generation_config import GenerationConfig
from ..models_parts.message import Message
from ..models_parts.tool_declaration import ToolDeclaration
from ..streaming.sse import DONE, parse_sse_line
from .nonstream_helpers import decode_completion, decode_stream_frame
from .style_helpers import build_chat_params


class OpenAIStyleAdapter(ChatAdapter):
    """Reusable base for OpenAI-compatible vendors.

    Subclasses set ``name``, ``default_base_url`` and ``default_model`` and
    may override :meth:`endpoint` or :meth:`auth_headers`.
    """

    CAPABILITIES = frozenset(
        {Capability.TOOLS, Capability.IMAGES, Capability.STREAMING, Capability.MULTIPLE_CHOICES}
    )
    CHAT_PATH = "/chat/completions"
    SUPPORTS_N = True
    SUPPORTS_TOP_K = False
    INCLUDE_MODEL = True

    def to_request(
        self,
        messages: Sequence[Message],
        config: GenerationConfig,
        tools: Sequence[ToolDeclaration] = (),
        *,
        stream: bool = False,
    ) -> Dict[str, Any]:
        if self.INCLUDE_MODEL and not self.model:
            raise ConfigurationError("model_key is required", provider=self.name)
        return build_chat_params(
            self.model,
            messages,
            config,
            tools,
            stream=stream,
            include_model=self.INCLUDE_MODEL,
            supports_n=self.SUPPORTS_N,
            supports_top_k=self.SUPPORTS_TOP_K,
        )

    def from_response(self, response: Any) -> CanonicalDelta:
        return decode_completion(response, provider=self.name)

    def to_stream_chunk(self, raw_chunk: Any) -> Optional[CanonicalDelta]:
        frame = parse_sse_line(raw_chunk, provider=self.name)
        if frame is None:
            return None
        if frame is DONE:
            return CanonicalDelta(done=True)
        return decode_stream_frame(frame, provider=self.name)

    def endpoint(self, stream: bool = False) -> str:
        if not self.base_url:
            raise ConfigurationError("base_url is required", provider=self.name)
        return f"{self.base_url}{self.CHAT_PATH}"


__all__ = ["OpenAIStyleAdapter"]
