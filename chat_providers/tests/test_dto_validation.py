"""Tests for pydantic DTOs: AdapterParams and ChatML request conversion."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from chat_providers.base.dto import AdapterParams, thread_from_chat_request
from chat_providers.base.errors import ValidationError
from chat_providers.base.models import ImagePart, TextPart, ToolCallPart, ToolMode, ToolResultPart
from chat_providers.gemini.client import GeminiAdapter


def test_adapter_params_keeps_vendor_fields():
    params = AdapterParams(model_key="m", deployment="prod", extra={"api_version": "2024-06-01"})
    assert params.option("deployment") == "prod"  # nosec B101 - test assertion
    assert params.option("api_version") == "2024-06-01"  # nosec B101 - test assertion
    assert params.option("missing", "fallback") == "fallback"  # nosec B101 - test assertion
    dumped = params.model_dump()
    assert dumped["deployment"] == "prod"  # nosec B101 - extras survive a dump/validate cycle
    assert AdapterParams.model_validate(dumped) == params  # nosec B101 - test assertion


def test_adapter_params_rejects_bad_timeout():
    with pytest.raises(PydanticValidationError):
        AdapterParams(timeout_seconds=0)


def test_chat_request_to_thread():
    thread = thread_from_chat_request(
        {
            "messages": [
                {"role": "system", "content": "be brief"},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": "what is this?"},
                        {"type": "image_url", "image_url": {"url": "https://img.test/a.png"}},
                    ],
                },
                {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {"id": "c1", "type": "function", "function": {"name": "lookup", "arguments": '{"q": "a"}'}}
                    ],
                },
                {"role": "tool", "tool_call_id": "c1", "content": "a cat"},
            ],
            "temperature": 0.3,
            "stop": "END",
            "tools": [{"type": "function", "function": {"name": "lookup", "parameters": {"type": "object"}}}],
            "tool_choice": "auto",
        },
        key="dto",
    )
    assert thread.key == "dto"  # nosec B101 - test assertion
    assert [m.role for m in thread.messages()] == ["system", "user", "assistant", "tool"]  # nosec B101
    assert thread.messages()[1].content == (TextPart("what is this?"), ImagePart("https://img.test/a.png"))  # nosec B101
    assert thread.messages()[2].content == (ToolCallPart("lookup", {"q": "a"}, id="c1"),)  # nosec B101
    assert thread.messages()[3].content == (ToolResultPart("c1", "a cat"),)  # nosec B101
    assert thread.config.stop_sequences == ("END",)  # nosec B101 - test assertion
    assert thread.config.tool_mode is ToolMode.AUTO  # nosec B101 - test assertion
    assert thread.tools[0].name == "lookup"  # nosec B101 - test assertion


def test_camel_case_sampling_names_reach_gemini():
    thread = thread_from_chat_request(
        {
            "messages": [
                {"role": "system", "content": "Write like a leprechaun"},
                {"role": "system", "content": "---BEGIN NOTE---\nSystem message\n---END NOTE---"},
                {"role": "user", "content": "User message"},
            ],
            "temperature": 0.5,
            "topK": 10,
            "topP": 0.8,
            "max_tokens": 100,
            "stopSequences": ["stop"],
            "n": 2,
        }
    )
    adapter = GeminiAdapter(model_key="gemini-1.5-pro", api_key="g-key")  # pragma: allowlist secret - test-only fake key
    body = adapter.to_request(thread.messages(), thread.config)
    assert body["generationConfig"] == {  # nosec B101 - test assertion
        "temperature": 0.5,
        "topK": 10,
        "topP": 0.8,
        "maxOutputTokens": 100,
        "stopSequences": ["stop"],
        "candidate_count": 2,
    }
    assert body["systemInstruction"] == {"parts": [{"text": "Write like a leprechaun"}]}  # nosec B101
    assert body["contents"] == [  # nosec B101 - test assertion
        {
            "role": "user",
            "parts": [
                {
                    "text": "---BEGIN IMPORTANT CONTEXT---\n---BEGIN NOTE---\nSystem message\n---END NOTE---\n"
                    "---END IMPORTANT CONTEXT---\n\nUser message"
                }
            ],
        }
    ]


def test_snake_case_sampling_names_still_accepted():
    thread = thread_from_chat_request(
        {"messages": [{"role": "user", "content": "hi"}], "top_k": 3, "top_p": 0.5, "stop_sequences": ["x"]}
    )
    assert (thread.config.top_k, thread.config.top_p) == (3, 0.5)  # nosec B101 - test assertion
    assert thread.config.stop_sequences == ("x",)  # nosec B101 - test assertion


@pytest.mark.parametrize(
    "choice,mode",
    [(None, None), ("none", ToolMode.NONE), ("required", ToolMode.REQUIRED), ("any", ToolMode.REQUIRED),
     ({"type": "function", "function": {"name": "x"}}, ToolMode.REQUIRED)],
)
def test_tool_choice_mapping(choice, mode):
    thread = thread_from_chat_request({"messages": [{"role": "user", "content": "hi"}], "tool_choice": choice})
    assert thread.config.tool_mode is mode  # nosec B101 - test assertion


@pytest.mark.parametrize(
    "payload",
    [
        {"messages": []},
        {"messages": [{"role": "narrator", "content": "x"}]},
        {"messages": [{"role": "tool", "content": "orphan"}]},
        {"messages": [{"role": "user", "content": "x"}], "temperature": 5},
        {"messages": [{"role": "user", "content": "x"}], "tool_choice": "sometimes"},
        {
            "messages": [
                {"role": "assistant", "tool_calls": [{"function": {"name": "f", "arguments": "{oops"}}]},
            ]
        },
    ],
)
def test_invalid_chat_requests(payload):
    with pytest.raises(ValidationError):
        thread_from_chat_request(payload)
