"""GeminiAdapter: canonical chat <-> Gemini ``generateContent`` wire.

Request mapping:
    * ``user -> user``, ``assistant -> model``, tool results -> ``user``
      content carrying ``functionResponse`` parts.
    * The first system message becomes ``systemInstruction``. Each later
      system message is wrapped in an IMPORTANT CONTEXT block and prepended
      to the next user message; several pending blocks are joined by a
      newline. Blocks with no following user message are sent as a final
      user content entry.
    * ``generationConfig`` always carries ``topK``, ``topP``,
      ``maxOutputTokens``, ``stopSequences`` and ``candidate_count`` with
      adapter defaults; ``temperature`` only when set.
    * Four safety categories at ``safety_threshold`` (default ``BLOCK_NONE``).
    * With tools: ``tools[0].function_declarations``, the function calling
      mode, and in ``ANY`` mode the line ``Use the "<name>" tool!`` appended
      to the last user message.

Streaming uses ``:streamGenerateContent?alt=sse``; every SSE frame is a
partial ``GenerateContentResponse``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.adapter import ChatAdapter
from ..base.capabilities import Capability
from ..base.dto.adapter_params import AdapterParams
from ..base.errors_parts.classification import vendor_error_from_body
from ..base.errors_parts.error_code import VendorErrorKind
from ..base.errors_parts.provider_error import ConfigurationError, DecodeError, VendorError
from ..base.models_parts.canonical_delta import CanonicalDelta, ChoiceDelta, ToolCallDelta
from ..base.models_parts.generation_config import GenerationConfig
from ..base.models_parts.message import Message
from ..base.models_parts.tool_declaration import ToolDeclaration
from ..base.streaming.sse import DONE, parse_sse_line
from ..config.defaults import GEMINI_DEFAULT_BASE_URL, GEMINI_DEFAULT_MODEL
from .helpers import (
    DEFAULT_SAFETY_THRESHOLD,
    FINISH_REASONS,
    SAFETY_THRESHOLDS,
    FunctionCallingMode,
    append_text,
    context_block,
    encode_parts,
    encode_tools,
    from_gemini_role,
    function_calling_mode,
    generation_config,
    prepend_text,
    safety_settings,
    to_gemini_role,
    tool_call_names,
)


class GeminiAdapter(ChatAdapter):
    """Google Gemini (Generative Language API, ``v1beta``)."""

    name = "gemini"
    default_model = GEMINI_DEFAULT_MODEL
    default_base_url = GEMINI_DEFAULT_BASE_URL
    CAPABILITIES = frozenset(
        {Capability.TOOLS, Capability.IMAGES, Capability.STREAMING, Capability.MULTIPLE_CHOICES}
    )

    def __init__(self, params: Optional[AdapterParams] = None, **overrides: Any) -> None:
        super().__init__(params, **overrides)
        threshold = str(self.params.option("safety_threshold", DEFAULT_SAFETY_THRESHOLD)).upper()
        if threshold not in SAFETY_THRESHOLDS:
            raise ConfigurationError(f"unknown safety_threshold {threshold!r}", provider=self.name)
        self._safety_threshold = threshold

    @property
    def safety_threshold(self) -> str:
        return self._safety_threshold

    # ----- request --------------------------------------------------------
    def _contents(self, messages: Sequence[Message]) -> tuple[Optional[str], List[Dict[str, Any]]]:
        system_instruction: Optional[str] = None
        pending: List[str] = []
        contents: List[Dict[str, Any]] = []
        call_names = tool_call_names(messages)
        for message in messages:
            if message.role == "system":
                if system_instruction is None:
                    system_instruction = message.text
                else:
                    pending.append(context_block(message.text))
                continue
            role = "user" if message.role == "tool" else to_gemini_role(message.role)
            parts = encode_parts(message, call_names)
            if message.role == "user" and pending:
                prepend_text(parts, "\n".join(pending) + "\n\n")
                pending = []
            contents.append({"role": role, "parts": parts})
        if pending:
            contents.append({"role": "user", "parts": [{"text": "\n".join(pending)}]})
        return system_instruction, contents

    def to_request(
        self,
        messages: Sequence[Message],
        config: GenerationConfig,
        tools: Sequence[ToolDeclaration] = (),
        *,
        stream: bool = False,
    ) -> Dict[str, Any]:
        system_instruction, contents = self._contents(messages)
        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": generation_config(config),
            "safetySettings": safety_settings(self._safety_threshold),
        }
        if system_instruction is not None:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if tools:
            mode = function_calling_mode(config.tool_mode)
            body["tools"] = encode_tools(tools)
            body["tool_config"] = {"function_calling_config": {"mode": mode.value}}
            if mode is FunctionCallingMode.ANY:
                last_user = next((c for c in reversed(contents) if c["role"] == "user"), None)
                if last_user is not None:
                    append_text(last_user["parts"], f'\nUse the "{tools[0].name}" tool!')
        return body

    # ----- response -------------------------------------------------------
    def _decode_candidate(self, pos: int, candidate: Dict[str, Any]) -> ChoiceDelta:
        content = candidate.get("content") or {}
        texts: List[str] = []
        calls: List[ToolCallDelta] = []
        for part in content.get("parts") or []:
            if "text" in part:
                texts.append(part["text"])
            elif "functionCall" in part:
                fn = part["functionCall"]
                calls.append(
                    ToolCallDelta(
                        index=len(calls),
                        id=fn.get("id"),
                        name=fn.get("name"),
                        arguments=json.dumps(fn.get("args") or {}),
                    )
                )
        raw_finish = candidate.get("finishReason")
        finish = FINISH_REASONS.get(raw_finish, raw_finish.lower()) if raw_finish else None
        return ChoiceDelta(
            index=int(candidate.get("index", pos)),
            role=from_gemini_role(content.get("role")),
            text="".join(texts),
            tool_calls=tuple(calls),
            finish_reason=finish,
        )

    def _decode(self, body: Any, *, done: bool) -> Optional[CanonicalDelta]:
        if not isinstance(body, dict):
            raise DecodeError("response body is not a JSON object", provider=self.name)
        err = body.get("error")
        if err:
            status = err.get("code") if isinstance(err, dict) else None
            raise vendor_error_from_body(status, body, provider=self.name)
        candidates = body.get("candidates")
        if not candidates:
            block = (body.get("promptFeedback") or {}).get("blockReason")
            if block:
                raise VendorError(VendorErrorKind.CONTENT_FILTER, f"prompt blocked: {block}", provider=self.name)
            if done:
                raise DecodeError("response has no candidates", provider=self.name)
            return None
        choices = tuple(self._decode_candidate(i, c) for i, c in enumerate(candidates))
        if not done:
            choices = tuple(c for c in choices if not c.is_empty)
            if not choices:
                return None
        return CanonicalDelta(choices=choices, done=done, response_id=body.get("responseId"))

    def from_response(self, response: Any) -> CanonicalDelta:
        delta = self._decode(response, done=True)
        if delta is None:
            raise DecodeError("response has no candidates", provider=self.name)
        return delta

    def to_stream_chunk(self, raw_chunk: Any) -> Optional[CanonicalDelta]:
        frame = parse_sse_line(raw_chunk, provider=self.name)
        if frame is None:
            return None
        if frame is DONE:
            return CanonicalDelta(done=True)
        return self._decode(frame, done=False)

    # ----- transport ------------------------------------------------------
    def endpoint(self, stream: bool = False) -> str:
        if not self.model:
            raise ConfigurationError("model_key is required", provider=self.name)
        action = "streamGenerateContent?alt=sse" if stream else "generateContent"
        return f"{self.base_url}/models/{self.model}:{action}"

    def auth_headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self.api_key} if self.api_key else {}


__all__ = ["GeminiAdapter"]
