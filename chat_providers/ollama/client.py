"""OllamaAdapter: canonical chat <-> local Ollama ``/api/chat``.

Sampling parameters go under ``options`` (``num_predict`` for max tokens).
Images are sent as raw base64 strings in ``images``, so only ``data:`` URLs
are accepted. Ollama streams by default; ``stream`` is therefore always set
explicitly. Stream frames are NDJSON objects carrying a ``done`` flag.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.adapter import ChatAdapter
from ..base.capabilities import Capability
from ..base.errors_parts.classification import vendor_error_from_body
from ..base.errors_parts.provider_error import ConfigurationError, DecodeError, ValidationError
from ..base.models_parts.canonical_delta import CanonicalDelta, ChoiceDelta, ToolCallDelta
from ..base.models_parts.content_part import ImagePart
from ..base.models_parts.generation_config import GenerationConfig
from ..base.models_parts.message import Message
from ..base.models_parts.tool_declaration import ToolDeclaration
from ..base.openai_style_parts.style_helpers import encode_tools
from ..base.streaming.sse import parse_ndjson_line
from ..config.defaults import OLLAMA_DEFAULT_HOST, OLLAMA_DEFAULT_MODEL

DONE_REASONS: Dict[str, str] = {"stop": "stop", "length": "length"}


def _encode_message(message: Message) -> List[Dict[str, Any]]:
    if message.role == "tool":
        return [{"role": "tool", "content": r.content} for r in message.tool_results]
    entry: Dict[str, Any] = {"role": message.role, "content": message.text}
    images = []
    for part in message.content:
        if isinstance(part, ImagePart):
            if not part.is_data_url:
                raise ValidationError("ollama accepts only base64 data URL images", provider="ollama")
            images.append(part.split_data_url()[1])
    if images:
        entry["images"] = images
    if message.tool_calls:
        entry["tool_calls"] = [
            {"function": {"name": c.name, "arguments": dict(c.arguments)}} for c in message.tool_calls
        ]
    return [entry]


def _options(config: GenerationConfig) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    if config.temperature is not None:
        options["temperature"] = config.temperature
    if config.top_k is not None:
        options["top_k"] = config.top_k
    if config.top_p is not None:
        options["top_p"] = config.top_p
    if config.max_tokens is not None:
        options["num_predict"] = config.max_tokens
    if config.stop_sequences:
        options["stop"] = list(config.stop_sequences)
    return options


class OllamaAdapter(ChatAdapter):
    name = "ollama"
    default_model = OLLAMA_DEFAULT_MODEL
    default_base_url = OLLAMA_DEFAULT_HOST
    CAPABILITIES = frozenset({Capability.TOOLS, Capability.IMAGES, Capability.STREAMING})

    def to_request(
        self,
        messages: Sequence[Message],
        config: GenerationConfig,
        tools: Sequence[ToolDeclaration] = (),
        *,
        stream: bool = False,
    ) -> Dict[str, Any]:
        if not self.model:
            raise ConfigurationError("model_key is required", provider=self.name)
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [entry for m in messages for entry in _encode_message(m)],
            "stream": stream,
        }
        options = _options(config)
        if options:
            body["options"] = options
        if tools:
            body["tools"] = encode_tools(tools)
        keep_alive = self.params.option("keep_alive")
        if keep_alive is not None:
            body["keep_alive"] = keep_alive
        return body

    def _decode(self, body: Any, *, final: bool) -> Optional[CanonicalDelta]:
        if not isinstance(body, dict):
            raise DecodeError("response body is not a JSON object", provider=self.name)
        if body.get("error"):
            raise vendor_error_from_body(None, body, provider=self.name)
        message = body.get("message")
        if not isinstance(message, dict):
            if final:
                raise DecodeError("response has no message", provider=self.name)
            message = {}
        calls = tuple(
            ToolCallDelta(
                index=i,
                name=(c.get("function") or {}).get("name"),
                arguments=json.dumps((c.get("function") or {}).get("arguments") or {}),
            )
            for i, c in enumerate(message.get("tool_calls") or [])
        )
        done = bool(body.get("done")) or final
        reason = body.get("done_reason") if body.get("done") else None
        if calls and reason == "stop":
            reason = "tool_calls"
        choice = ChoiceDelta(
            text=message.get("content") or "",
            tool_calls=calls,
            finish_reason=DONE_REASONS.get(reason, reason) if reason else None,
        )
        if not final and choice.is_empty and not done:
            return None
        return CanonicalDelta(choices=(choice,) if final or not choice.is_empty else (), done=done)

    def from_response(self, response: Any) -> CanonicalDelta:
        delta = self._decode(response, final=True)
        if delta is None:
            raise DecodeError("response has no message", provider=self.name)
        return delta

    def to_stream_chunk(self, raw_chunk: Any) -> Optional[CanonicalDelta]:
        frame = parse_ndjson_line(raw_chunk, provider=self.name)
        if frame is None:
            return None
        return self._decode(frame, final=False)

    def endpoint(self, stream: bool = False) -> str:
        return f"{self.base_url}/api/chat"


__all__ = ["OllamaAdapter"]
