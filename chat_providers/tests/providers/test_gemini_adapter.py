"""Unit tests for the Gemini adapter.

Exercises the canonical -> ``generateContent`` mapping against fixed
request fixtures (system instruction plus merged context blocks, adapter
defaults, tool forcing, ordered multi-turn content) and the response path
(candidates, role round-trip, function calls, blocked prompts, stream frames).

All tests are offline: adapters are pure translators.
"""
from __future__ import annotations

import json

import pytest

from chat_providers.base.errors import ConfigurationError, DecodeError, ValidationError, VendorError, VendorErrorKind
from chat_providers.base.models import (
    GenerationConfig,
    ImagePart,
    Message,
    TextPart,
    ToolCallPart,
    ToolDeclaration,
    ToolMode,
    ToolResultPart,
)
from chat_providers.gemini.client import GeminiAdapter
from chat_providers.gemini.helpers import from_gemini_role, to_gemini_role

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]

LOOKUP = ToolDeclaration(
    name="lookup",
    description="Semantic search",
    parameters={
        "type": "object",
        "properties": {"hypotheticals": {"type": "array", "items": {"type": "string"}}},
    },
)


def _adapter(**kw) -> GeminiAdapter:
    return GeminiAdapter(model_key="gemini-1.5-pro", api_key="g-key", **kw)  # pragma: allowlist secret


def test_system_messages_merge_into_user_turn():
    messages = [
        Message("system", "Write like a leprechaun"),
        Message("system", "---BEGIN NOTE---\nSystem message\n---END NOTE---"),
        Message("user", "User message"),
    ]
    config = GenerationConfig(temperature=0.5, top_k=10, top_p=0.8, max_tokens=100, stop_sequences=("stop",), n=2)
    assert _adapter().to_request(messages, config) == {  # nosec B101 - pytest assertion in tests
        "contents": [
            {
                "role": "user",
                "parts": [
                    {
                        "text": "---BEGIN IMPORTANT CONTEXT---\n---BEGIN NOTE---\nSystem message\n"
                        "---END NOTE---\n---END IMPORTANT CONTEXT---\n\nUser message"
                    }
                ],
            }
        ],
        "generationConfig": {
            "temperature": 0.5,
            "topK": 10,
            "topP": 0.8,
            "maxOutputTokens": 100,
            "stopSequences": ["stop"],
            "candidate_count": 2,
        },
        "safetySettings": SAFETY_SETTINGS,
        "systemInstruction": {"parts": [{"text": "Write like a leprechaun"}]},
    }


def test_no_system_message_applies_defaults():
    body = _adapter().to_request([Message("user", "User message")], GenerationConfig(temperature=0.5))
    assert body == {  # nosec B101 - pytest assertion in tests
        "contents": [{"role": "user", "parts": [{"text": "User message"}]}],
        "generationConfig": {
            "temperature": 0.5,
            "topK": 1,
            "topP": 1,
            "maxOutputTokens": 2048,
            "stopSequences": [],
            "candidate_count": 1,
        },
        "safetySettings": SAFETY_SETTINGS,
    }
    assert "systemInstruction" not in body  # nosec B101 - pytest assertion in tests


def test_tools_force_a_call():
    body = _adapter().to_request(
        [Message("user", "Hello")], GenerationConfig(temperature=0.5, max_tokens=100), [LOOKUP]
    )
    assert body == {  # nosec B101 - pytest assertion in tests
        "contents": [{"role": "user", "parts": [{"text": 'Hello\nUse the "lookup" tool!'}]}],
        "generationConfig": {
            "temperature": 0.5,
            "topK": 1,
            "topP": 1,
            "maxOutputTokens": 100,
            "stopSequences": [],
            "candidate_count": 1,
        },
        "safetySettings": SAFETY_SETTINGS,
        "tools": [
            {
                "function_declarations": [
                    {
                        "name": "lookup",
                        "description": "Semantic search",
                        "parameters": {
                            "type": "object",
                            "properties": {"hypotheticals": {"type": "array", "items": {"type": "string"}}},
                        },
                    }
                ]
            }
        ],
        "tool_config": {"function_calling_config": {"mode": "ANY"}},
    }


def test_auto_tool_mode_does_not_nudge():
    body = _adapter().to_request([Message("user", "Hello")], GenerationConfig(tool_mode=ToolMode.AUTO), [LOOKUP])
    assert body["contents"][0]["parts"] == [{"text": "Hello"}]  # nosec B101 - pytest assertion in tests
    assert body["tool_config"]["function_calling_config"]["mode"] == "AUTO"  # nosec B101


def test_content_arrays_map_in_order():
    messages = [
        Message("user", [{"type": "text", "text": "User message"}]),
        Message("assistant", [{"type": "text", "text": "Assistant message"}]),
        Message("user", [{"type": "text", "text": "User message 2"}]),
    ]
    body = _adapter().to_request(messages, GenerationConfig(temperature=0.5))
    assert body["contents"] == [  # nosec B101 - pytest assertion in tests
        {"role": "user", "parts": [{"text": "User message"}]},
        {"role": "model", "parts": [{"text": "Assistant message"}]},
        {"role": "user", "parts": [{"text": "User message 2"}]},
    ]
    assert body["generationConfig"]["maxOutputTokens"] == 2048  # nosec B101


def test_trailing_system_message_becomes_user_entry():
    messages = [Message("system", "base"), Message("user", "hi"), Message("system", "late note")]
    body = _adapter().to_request(messages, GenerationConfig())
    assert body["contents"][-1] == {  # nosec B101 - pytest assertion in tests
        "role": "user",
        "parts": [{"text": "---BEGIN IMPORTANT CONTEXT---\nlate note\n---END IMPORTANT CONTEXT---"}],
    }


def test_three_system_messages_join_context_blocks():
    messages = [Message("system", "A"), Message("system", "B"), Message("system", "C"), Message("user", "User")]
    body = _adapter().to_request(messages, GenerationConfig())
    assert body["systemInstruction"] == {"parts": [{"text": "A"}]}  # nosec B101 - pytest assertion in tests
    assert body["contents"] == [  # nosec B101 - pytest assertion in tests
        {
            "role": "user",
            "parts": [
                {
                    "text": "---BEGIN IMPORTANT CONTEXT---\nB\n---END IMPORTANT CONTEXT---\n"
                    "---BEGIN IMPORTANT CONTEXT---\nC\n---END IMPORTANT CONTEXT---\n\nUser"
                }
            ],
        }
    ]


def test_images_and_tool_round_trip_parts():
    messages = [
        Message("user", [TextPart("describe"), ImagePart("data:image/png;base64,QUJD"), ImagePart("gs://b/x.jpg")]),
        Message("assistant", [ToolCallPart("lookup", {"q": "x"}, id="c1")]),
        Message("tool", [ToolResultPart("c1", '{"hits": 3}'), ToolResultPart("c1", "plain text")]),
    ]
    contents = _adapter().to_request(messages, GenerationConfig(tool_mode="auto"), [LOOKUP])["contents"]
    assert contents[0]["parts"][1] == {"inline_data": {"mime_type": "image/png", "data": "QUJD"}}  # nosec B101
    assert contents[0]["parts"][2] == {"file_data": {"file_uri": "gs://b/x.jpg"}}  # nosec B101
    assert contents[1] == {"role": "model", "parts": [{"functionCall": {"name": "lookup", "args": {"q": "x"}}}]}  # nosec B101
    assert contents[2]["role"] == "user"  # nosec B101 - pytest assertion in tests
    assert contents[2]["parts"] == [  # nosec B101 - pytest assertion in tests
        {"functionResponse": {"name": "lookup", "response": {"hits": 3}}},
        {"functionResponse": {"name": "lookup", "response": {"content": "plain text"}}},
    ]


def test_orphan_tool_result_is_rejected():
    with pytest.raises(ValidationError):
        _adapter().to_request([Message("tool", [ToolResultPart("missing", "x")])], GenerationConfig())


def test_role_round_trip():
    for role in ("user", "assistant"):
        assert from_gemini_role(to_gemini_role(role)) == role  # nosec B101 - pytest assertion in tests
    delta = _adapter().from_response(
        {"candidates": [{"content": {"role": "model", "parts": [{"text": "hi"}]}, "finishReason": "STOP"}]}
    )
    assert delta.choices[0].role == "assistant"  # nosec B101 - pytest assertion in tests
    assert delta.choices[0].finish_reason == "stop"  # nosec B101 - pytest assertion in tests
    assert delta.done is True  # nosec B101 - pytest assertion in tests


def test_multiple_candidates_and_function_calls():
    delta = _adapter().from_response(
        {
            "responseId": "resp-1",
            "candidates": [
                {"index": 0, "content": {"role": "model", "parts": [{"text": "A"}]}, "finishReason": "MAX_TOKENS"},
                {
                    "index": 1,
                    "content": {"role": "model", "parts": [{"functionCall": {"name": "lookup", "args": {"q": 1}}}]},
                    "finishReason": "STOP",
                },
            ],
        }
    )
    assert [c.index for c in delta.choices] == [0, 1]  # nosec B101 - pytest assertion in tests
    assert delta.choices[0].finish_reason == "length"  # nosec B101 - pytest assertion in tests
    call = delta.choices[1].tool_calls[0]
    assert (call.name, json.loads(call.arguments)) == ("lookup", {"q": 1})  # nosec B101
    assert delta.response_id == "resp-1"  # nosec B101 - pytest assertion in tests


def test_error_and_blocked_responses():
    with pytest.raises(VendorError) as exc:
        _adapter().from_response({"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})
    assert exc.value.kind is VendorErrorKind.RATE_LIMIT  # nosec B101 - pytest assertion in tests
    with pytest.raises(VendorError) as blocked:
        _adapter().from_response({"promptFeedback": {"blockReason": "SAFETY"}})
    assert blocked.value.kind is VendorErrorKind.CONTENT_FILTER  # nosec B101 - pytest assertion in tests
    with pytest.raises(DecodeError):
        _adapter().from_response({"candidates": []})


def test_final_response_without_a_delta_is_a_decode_error(monkeypatch):
    adapter = _adapter()
    monkeypatch.setattr(adapter, "_decode", lambda body, *, done: None)
    with pytest.raises(DecodeError):
        adapter.from_response({"candidates": [{"content": {"parts": [{"text": "x"}]}}]})


def test_stream_frames():
    adapter = _adapter()
    frame = 'data: {"candidates": [{"content": {"role": "model", "parts": [{"text": "chunk"}]}}]}'
    assert adapter.to_stream_chunk(frame).text == "chunk"  # nosec B101 - pytest assertion in tests
    assert adapter.to_stream_chunk("") is None  # nosec B101 - pytest assertion in tests
    assert adapter.to_stream_chunk('data: {"usageMetadata": {"totalTokenCount": 3}}') is None  # nosec B101


def test_endpoint_headers_and_safety_threshold():
    adapter = _adapter(safety_threshold="block_only_high")
    assert adapter.endpoint() == (  # nosec B101 - pytest assertion in tests
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-pro:generateContent"
    )
    assert adapter.endpoint(stream=True).endswith(":streamGenerateContent?alt=sse")  # nosec B101
    assert adapter.headers()["x-goog-api-key"] == "g-key"  # nosec B101 - pytest assertion in tests
    assert "Authorization" not in adapter.headers()  # nosec B101 - pytest assertion in tests
    body = adapter.to_request([Message("user", "x")], GenerationConfig())
    assert {s["threshold"] for s in body["safetySettings"]} == {"BLOCK_ONLY_HIGH"}  # nosec B101
    with pytest.raises(ConfigurationError):
        _adapter(safety_threshold="BLOCK_EVERYTHING")


def test_translation_does_not_mutate_inputs():
    messages = (Message("system", "a"), Message("system", "b"), Message("user", "c"))
    snapshot = tuple(messages)
    adapter = _adapter()
    first = adapter.to_request(messages, GenerationConfig(), [LOOKUP])
    second = adapter.to_request(messages, GenerationConfig(), [LOOKUP])
    assert first == second and messages == snapshot  # nosec B101 - pytest assertion in tests
