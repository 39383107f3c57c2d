"""Tests for the httpx-backed transport.

Uses ``httpx.MockTransport`` so no socket is opened. Covers JSON posts,
line streaming, error statuses passed through (not raised), network errors
mapped to ``TransportError``, client pooling, and one end-to-end Gemini
stream through the dispatcher.
"""

from __future__ import annotations

import json

import httpx
import pytest

from chat_providers.base.dispatcher import RequestDispatcher, RequestStatus
from chat_providers.base.errors import TransportError
from chat_providers.base.http import HttpxTransport, close_all_clients, get_httpx_client
from chat_providers.base.models import Thread
from chat_providers.base.registry import AdapterRegistry


@pytest.fixture(autouse=True)
def _close_clients():
    yield
    close_all_clients()


def test_post_json_round_trip():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    transport = HttpxTransport(mock_transport=httpx.MockTransport(handler))
    resp = transport.post_json("https://vendor.test/chat", {"Authorization": "Bearer k"}, {"a": 1})
    assert resp.ok and resp.data == {"ok": True}  # nosec B101 - test assertion
    assert seen == {"url": "https://vendor.test/chat", "auth": "Bearer k", "body": {"a": 1}}  # nosec B101


def test_error_status_is_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream unavailable")

    transport = HttpxTransport(mock_transport=httpx.MockTransport(handler))
    resp = transport.post_json("https://vendor.test/chat", {}, {})
    assert resp.ok is False and resp.status_code == 503  # nosec B101 - test assertion
    assert resp.data == "upstream unavailable"  # nosec B101 - non-JSON body kept as text


def test_network_errors_become_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = HttpxTransport(provider="openai", mock_transport=httpx.MockTransport(handler))
    with pytest.raises(TransportError) as exc:
        transport.post_json("https://vendor.test/chat", {}, {})
    assert exc.value.provider == "openai"  # nosec B101 - test assertion
    assert isinstance(exc.value.raw, httpx.ConnectError)  # nosec B101 - test assertion
    with pytest.raises(TransportError):
        transport.open_stream("https://vendor.test/chat", {}, {})


def test_open_stream_yields_lines_and_closes():
    body = b'data: {"n": 1}\n\ndata: {"n": 2}\n\ndata: [DONE]\n\n'

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

    transport = HttpxTransport(mock_transport=httpx.MockTransport(handler))
    stream = transport.open_stream("https://vendor.test/chat", {}, {"stream": True})
    assert stream.status_code == 200  # nosec B101 - test assertion
    lines = [line for line in stream.iter_lines() if line]
    assert lines == ['data: {"n": 1}', 'data: {"n": 2}', "data: [DONE]"]  # nosec B101
    stream.close()
    stream.close()


def test_stream_error_body_is_readable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "slow down"}})

    transport = HttpxTransport(mock_transport=httpx.MockTransport(handler))
    stream = transport.open_stream("https://vendor.test/chat", {}, {})
    assert stream.status_code == 429  # nosec B101 - test assertion
    assert stream.read_json() == {"error": {"message": "slow down"}}  # nosec B101 - test assertion
    stream.close()


def test_clients_are_pooled_per_purpose():
    mock = httpx.MockTransport(lambda request: httpx.Response(200))
    assert get_httpx_client("chat", mock) is get_httpx_client("chat", mock)  # nosec B101
    assert get_httpx_client("chat", mock) is not get_httpx_client("stream", mock)  # nosec B101


def test_gemini_stream_end_to_end():
    frames = [
        {"candidates": [{"content": {"role": "model", "parts": [{"text": "Top o' "}]}, "index": 0}]},
        {
            "candidates": [
                {"content": {"role": "model", "parts": [{"text": "the mornin'"}]}, "finishReason": "STOP", "index": 0}
            ]
        },
    ]
    body = "".join(f"data: {json.dumps(f)}\r\n\r\n" for f in frames).encode("utf-8")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

    registry = AdapterRegistry(
        {"adapter": "gemini", "gemini": {"model_key": "gemini-1.5-flash", "api_key": "g-key"}}  # pragma: allowlist secret
    )
    dispatcher = RequestDispatcher(registry, HttpxTransport(mock_transport=httpx.MockTransport(handler)))
    thread = Thread(key="irish")
    thread.add_message("system", "Write like a leprechaun")
    thread.add_message("user", "Greet me")
    handle = dispatcher.send(thread)
    assert [d.text for d in handle] == ["Top o' ", "the mornin'"]  # nosec B101 - test assertion
    assert handle.status is RequestStatus.COMPLETED  # nosec B101 - test assertion
    assert seen["url"].endswith("/models/gemini-1.5-flash:streamGenerateContent?alt=sse")  # nosec B101
    assert seen["key"] == "g-key"  # nosec B101 - test assertion
    assert seen["payload"]["systemInstruction"] == {"parts": [{"text": "Write like a leprechaun"}]}  # nosec B101
    assert thread.messages()[-1].text == "Top o' the mornin'"  # nosec B101 - test assertion
