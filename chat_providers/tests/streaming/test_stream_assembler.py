"""Stream assembly tests.

Ensures deltas merge per choice and per tool index in arrival order, that
complete responses go through the same path, and that malformed tool-call
arguments surface as ``DecodeError``.
"""
from __future__ import annotations

import pytest

from chat_providers.base.errors import DecodeError
from chat_providers.base.models import CanonicalDelta, ChoiceDelta, TextPart, ToolCallDelta, ToolCallPart
from chat_providers.base.models_parts.canonical_delta import text_delta
from chat_providers.base.streaming import StreamAssembler, StreamMetrics, assemble


def _tool(index: int, **kw) -> CanonicalDelta:
    return CanonicalDelta(choices=(ChoiceDelta(tool_calls=(ToolCallDelta(index=index, **kw),)),))


def test_text_fragments_concatenate_in_order():
    messages = assemble([text_delta("Hel"), text_delta("lo"), text_delta("", finish_reason="stop")], turn_index=4)
    assert len(messages) == 1  # nosec B101 - test assertion
    msg = messages[0]
    assert msg.role == "assistant" and msg.text == "Hello"  # nosec B101 - test assertion
    assert (msg.turn_index, msg.choice_index) == (4, 0)  # nosec B101 - test assertion


def test_choices_are_kept_apart():
    asm = StreamAssembler()
    asm.extend([text_delta("b1", index=1), text_delta("a1"), text_delta("b2", index=1), text_delta("a2")])
    assert asm.choice_indices == [0, 1]  # nosec B101 - test assertion
    assert [m.text for m in asm.messages()] == ["a1a2", "b1b2"]  # nosec B101 - test assertion


def test_tool_call_arguments_assemble_per_index():
    asm = StreamAssembler()
    asm.extend(
        [
            text_delta("Let me check. "),
            _tool(0, id="c0", name="weather"),
            _tool(1, id="c1", name="time"),
            _tool(0, arguments='{"city": '),
            _tool(1, arguments="{}"),
            _tool(0, arguments='"Oslo"}'),
            CanonicalDelta(choices=(ChoiceDelta(finish_reason="tool_calls"),), done=True),
        ]
    )
    assert asm.done is True  # nosec B101 - test assertion
    assert asm.finish_reason(0) == "tool_calls"  # nosec B101 - test assertion
    [msg] = asm.messages()
    assert msg.content == (  # nosec B101 - test assertion
        TextPart("Let me check. "),
        ToolCallPart("weather", {"city": "Oslo"}, id="c0"),
        ToolCallPart("time", {}, id="c1"),
    )


def test_tool_only_message_has_no_text_part():
    [msg] = assemble([_tool(0, id="c", name="noop", arguments="")])
    assert msg.content == (ToolCallPart("noop", {}, id="c"),)  # nosec B101 - test assertion


def test_empty_response_yields_empty_text_message():
    [msg] = assemble([CanonicalDelta(choices=(ChoiceDelta(finish_reason="stop"),), done=True)])
    assert msg.content == (TextPart(""),)  # nosec B101 - test assertion


@pytest.mark.parametrize(
    "deltas",
    [
        [_tool(0, name="f", arguments='{"a": ')],
        [_tool(0, name="f", arguments="[1, 2]")],
        [_tool(0, arguments="{}")],
    ],
)
def test_malformed_tool_calls_raise(deltas):
    with pytest.raises(DecodeError):
        assemble(deltas)


def test_stream_metrics_first_delta_only_once():
    metrics = StreamMetrics()
    assert metrics.record_delta() is True  # nosec B101 - test assertion
    assert metrics.record_delta() is False  # nosec B101 - test assertion
    assert metrics.emitted == 2  # nosec B101 - test assertion
    assert metrics.time_to_first_delta_ms is not None and metrics.time_to_first_delta_ms >= 0  # nosec B101
    assert metrics.finish() >= metrics.time_to_first_delta_ms  # nosec B101 - test assertion
