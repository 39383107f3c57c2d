"""CohereAdapter: canonical chat <-> Cohere Chat v1.

Cohere v1 splits a conversation into ``preamble`` (all system text),
``chat_history`` and the current ``message`` (the final user message). When
the conversation ends with tool results, ``message`` is empty and the results
travel in ``tool_results``. The stream is newline-delimited JSON events.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.adapter import ChatAdapter
from ..base.capabilities import Capability
from ..base.errors_parts.classification import vendor_error_from_body
from ..base.errors_parts.error_code import VendorErrorKind
from ..base.errors_parts.provider_error import DecodeError, ValidationError, VendorError
from ..base.models_parts.canonical_delta import CanonicalDelta, ChoiceDelta, ToolCallDelta
from ..base.models_parts.generation_config import GenerationConfig
from ..base.models_parts.message import Message
from ..base.models_parts.tool_declaration import ToolDeclaration
from ..base.streaming.sse import parse_ndjson_line
from ..config.defaults import COHERE_DEFAULT_BASE_URL, COHERE_DEFAULT_MODEL
from .helpers import FINISH_REASONS, encode_tool_results, encode_tools, history_entry


def _finish(reason: Optional[str]) -> Optional[str]:
    return FINISH_REASONS.get(reason, reason.lower()) if reason else None


def _tool_call_deltas(raw: Any) -> tuple:
    return tuple(
        ToolCallDelta(index=i, name=c.get("name"), arguments=json.dumps(c.get("parameters") or {}))
        for i, c in enumerate(raw or [])
    )


class CohereAdapter(ChatAdapter):
    name = "cohere"
    default_model = COHERE_DEFAULT_MODEL
    default_base_url = COHERE_DEFAULT_BASE_URL
    CAPABILITIES = frozenset({Capability.TOOLS, Capability.STREAMING})

    def to_request(
        self,
        messages: Sequence[Message],
        config: GenerationConfig,
        tools: Sequence[ToolDeclaration] = (),
        *,
        stream: bool = False,
    ) -> Dict[str, Any]:
        system = [m.text for m in messages if m.role == "system"]
        convo = [m for m in messages if m.role != "system"]
        calls = {c.id: {"name": c.name, "parameters": dict(c.arguments)} for m in convo for c in m.tool_calls if c.id}

        trailing_tools: List[Message] = []
        while convo and convo[-1].role == "tool":
            trailing_tools.insert(0, convo.pop())
        if trailing_tools:
            current = ""
        elif convo and convo[-1].role == "user":
            current = convo.pop().text
        else:
            raise ValidationError("cohere requests must end with a user or tool message", provider=self.name)

        body: Dict[str, Any] = {"message": current}
        if self.model:
            body["model"] = self.model
        if convo:
            body["chat_history"] = [history_entry(m, calls) for m in convo]
        if system:
            body["preamble"] = "\n\n".join(system)
        if trailing_tools:
            body["tool_results"] = encode_tool_results(trailing_tools, calls)
        if config.temperature is not None:
            body["temperature"] = config.temperature
        if config.top_k is not None:
            body["k"] = config.top_k
        if config.top_p is not None:
            body["p"] = config.top_p
        if config.max_tokens is not None:
            body["max_tokens"] = config.max_tokens
        if config.stop_sequences:
            body["stop_sequences"] = list(config.stop_sequences)
        if tools:
            body["tools"] = encode_tools(tools)
        if stream:
            body["stream"] = True
        return body

    def from_response(self, response: Any) -> CanonicalDelta:
        if not isinstance(response, dict):
            raise DecodeError("response body is not a JSON object", provider=self.name)
        if "text" not in response:
            if response.get("message"):
                raise vendor_error_from_body(None, response, provider=self.name)
            raise DecodeError("response has no text", provider=self.name)
        choice = ChoiceDelta(
            text=response.get("text") or "",
            tool_calls=_tool_call_deltas(response.get("tool_calls")),
            finish_reason=_finish(response.get("finish_reason")),
        )
        return CanonicalDelta(choices=(choice,), done=True, response_id=response.get("generation_id"))

    def to_stream_chunk(self, raw_chunk: Any) -> Optional[CanonicalDelta]:
        event = parse_ndjson_line(raw_chunk, provider=self.name)
        if event is None:
            return None
        kind = event.get("event_type")
        if kind == "text-generation":
            text = event.get("text") or ""
            return CanonicalDelta(choices=(ChoiceDelta(text=text),)) if text else None
        if kind == "tool-calls-generation":
            calls = _tool_call_deltas(event.get("tool_calls"))
            return CanonicalDelta(choices=(ChoiceDelta(tool_calls=calls),)) if calls else None
        if kind == "stream-end":
            reason = event.get("finish_reason")
            if reason == "ERROR":
                raise VendorError(VendorErrorKind.SERVER_ERROR, "stream ended with ERROR", provider=self.name)
            return CanonicalDelta(choices=(ChoiceDelta(finish_reason=_finish(reason)),), done=True)
        # stream-start, search-queries-generation, citation-generation, tool-calls-chunk
        return None

    def endpoint(self, stream: bool = False) -> str:
        return f"{self.base_url}/chat"


__all__ = ["CohereAdapter"]
