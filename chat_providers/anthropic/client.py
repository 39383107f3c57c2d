"""AnthropicAdapter: canonical chat <-> Anthropic Messages API.

Anthropic has a single top-level ``system`` string, strict user/assistant
alternation, ``max_tokens`` as a required field, and no multiple-choice
support. Stream events are decoded one at a time using only the block
``index`` each event carries.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence

from ..base.adapter import ChatAdapter
from ..base.capabilities import Capability
from ..base.errors_parts.classification import vendor_error_from_body
from ..base.errors_parts.provider_error import ConfigurationError, DecodeError
from ..base.models_parts.canonical_delta import CanonicalDelta, ChoiceDelta, ToolCallDelta
from ..base.models_parts.generation_config import GenerationConfig
from ..base.models_parts.message import Message
from ..base.models_parts.tool_declaration import ToolDeclaration
from ..base.streaming.sse import DONE, parse_sse_line
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_BASE_URL, ANTHROPIC_DEFAULT_MODEL
from .helpers import (
    DEFAULT_MAX_TOKENS,
    STOP_REASONS,
    encode_messages,
    encode_tool_choice,
    encode_tools,
    split_system,
)


def _finish(reason: Optional[str]) -> Optional[str]:
    return STOP_REASONS.get(reason, reason) if reason else None


class AnthropicAdapter(ChatAdapter):
    name = "anthropic"
    default_model = ANTHROPIC_DEFAULT_MODEL
    default_base_url = ANTHROPIC_DEFAULT_BASE_URL
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
        system, rest = split_system(messages)
        body: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": config.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": encode_messages(rest),
        }
        if system:
            body["system"] = system
        if config.temperature is not None:
            body["temperature"] = config.temperature
        if config.top_k is not None:
            body["top_k"] = config.top_k
        if config.top_p is not None:
            body["top_p"] = config.top_p
        if config.stop_sequences:
            body["stop_sequences"] = list(config.stop_sequences)
        if tools:
            body["tools"] = encode_tools(tools)
            body["tool_choice"] = encode_tool_choice(tools, config.tool_mode)
        if stream:
            body["stream"] = True
        return body

    def from_response(self, response: Any) -> CanonicalDelta:
        if not isinstance(response, dict):
            raise DecodeError("response body is not a JSON object", provider=self.name)
        if response.get("type") == "error" or response.get("error"):
            raise vendor_error_from_body(None, response, provider=self.name)
        blocks = response.get("content")
        if not isinstance(blocks, list):
            raise DecodeError("response has no content blocks", provider=self.name)
        texts = []
        calls = []
        for block in blocks:
            kind = block.get("type")
            if kind == "text":
                texts.append(block.get("text", ""))
            elif kind == "tool_use":
                calls.append(
                    ToolCallDelta(
                        index=len(calls),
                        id=block.get("id"),
                        name=block.get("name"),
                        arguments=json.dumps(block.get("input") or {}),
                    )
                )
        choice = ChoiceDelta(
            index=0,
            text="".join(texts),
            tool_calls=tuple(calls),
            finish_reason=_finish(response.get("stop_reason")),
        )
        return CanonicalDelta(choices=(choice,), done=True, response_id=response.get("id"))

    def to_stream_chunk(self, raw_chunk: Any) -> Optional[CanonicalDelta]:
        event = parse_sse_line(raw_chunk, provider=self.name)
        if event is None:
            return None
        if event is DONE:
            return CanonicalDelta(done=True)
        kind = event.get("type")
        if kind == "error":
            raise vendor_error_from_body(None, event, provider=self.name)
        if kind == "message_stop":
            return CanonicalDelta(done=True)
        if kind == "message_delta":
            reason = _finish((event.get("delta") or {}).get("stop_reason"))
            return CanonicalDelta(choices=(ChoiceDelta(finish_reason=reason),)) if reason else None
        index = int(event.get("index", 0))
        if kind == "content_block_start":
            block = event.get("content_block") or {}
            if block.get("type") == "tool_use":
                call = ToolCallDelta(index=index, id=block.get("id"), name=block.get("name"))
                return CanonicalDelta(choices=(ChoiceDelta(tool_calls=(call,)),))
            text = block.get("text") or ""
            return CanonicalDelta(choices=(ChoiceDelta(text=text),)) if text else None
        if kind == "content_block_delta":
            delta = event.get("delta") or {}
            if delta.get("type") == "text_delta" and delta.get("text"):
                return CanonicalDelta(choices=(ChoiceDelta(text=delta["text"]),))
            if delta.get("type") == "input_json_delta" and delta.get("partial_json"):
                call = ToolCallDelta(index=index, arguments=delta["partial_json"])
                return CanonicalDelta(choices=(ChoiceDelta(tool_calls=(call,)),))
        # message_start, content_block_stop, ping
        return None

    def endpoint(self, stream: bool = False) -> str:
        return f"{self.base_url}/v1/messages"

    def auth_headers(self) -> Dict[str, str]:
        headers = {"anthropic-version": str(self.params.option("api_version", ANTHROPIC_API_VERSION))}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers


__all__ = ["AnthropicAdapter"]
