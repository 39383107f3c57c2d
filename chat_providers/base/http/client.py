"""HTTP transport collaborator built on a shared ``httpx.Client`` pool.

The dispatcher talks to vendors only through the :class:`Transport`
protocol: one JSON POST for complete responses and one streamed POST whose
body is consumed line by line (SSE or NDJSON framing is the adapter's
concern). :class:`HttpxTransport` is the default implementation; tests pass
any object with the same two methods.

Pooling:
    Clients are cached per ``purpose`` ("chat" or "stream") and reused across
    requests; all pooled clients are closed at interpreter exit, or explicitly
    via :func:`close_all_clients`.

Errors:
    ``httpx`` network and timeout failures become :class:`TransportError`.
    HTTP error statuses are *not* raised here; the dispatcher hands the status
    and body to the adapter's ``parse_error`` so vendor bodies are decoded.
"""

from __future__ import annotations

import atexit
import json
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Protocol, Tuple, runtime_checkable

import httpx

from ..errors_parts.provider_error import TransportError
from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[httpx.BaseTransport], str], httpx.Client] = {}
_LOCK = threading.RLock()


def _build_timeout(purpose: str) -> httpx.Timeout:
    cfg = get_timeout_config()
    read = cfg.stream_timeout_seconds if purpose == "stream" else cfg.http_timeout_seconds
    return httpx.Timeout(read, connect=cfg.connect_timeout_seconds)


def get_httpx_client(purpose: str, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``purpose``.

    ``transport`` lets tests mount an ``httpx.MockTransport``; it is part of
    the cache key so mocked and real clients never mix.
    """
    key = (transport, purpose)
    client = _CLIENTS.get(key)
    if client is not None:
        return client
    with _LOCK:
        client = _CLIENTS.get(key)
        if client is None:
            client = httpx.Client(timeout=_build_timeout(purpose), transport=transport)
            _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled clients."""
    with _LOCK:
        for client in _CLIENTS.values():
            client.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)


@dataclass(frozen=True)
class TransportResponse:
    """Status and decoded body of a complete HTTP response.

    ``data`` is the parsed JSON body, or the raw text when it is not JSON.
    """

    status_code: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class TransportStream(Protocol):
    """An open streamed response."""

    status_code: int

    def iter_lines(self) -> Iterator[str]: ...

    def read_json(self) -> Any: ...

    def close(self) -> None: ...


@runtime_checkable
class Transport(Protocol):
    """What the dispatcher needs from an HTTP layer."""

    def post_json(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> TransportResponse: ...

    def open_stream(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> TransportStream: ...


def _decode_body(text: str) -> Any:
    try:
        return json.loads(text) if text else None
    except ValueError:
        return text


class _HttpxStream:
    """``TransportStream`` over an ``httpx`` streaming response context."""

    def __init__(self, ctx: Any, response: httpx.Response, provider: Optional[str]) -> None:
        self._ctx = ctx
        self._response = response
        self._provider = provider
        self._closed = False
        self.status_code = response.status_code

    def iter_lines(self) -> Iterator[str]:
        try:
            for line in self._response.iter_lines():
                if self._closed:
                    return
                yield line
        except httpx.StreamClosed:
            return
        except httpx.HTTPError as exc:
            if self._closed:
                return
            raise TransportError(f"stream read failed: {exc}", provider=self._provider, raw=exc) from exc

    def read_json(self) -> Any:
        try:
            self._response.read()
        except httpx.HTTPError as exc:
            raise TransportError(f"body read failed: {exc}", provider=self._provider, raw=exc) from exc
        return _decode_body(self._response.text)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._ctx.__exit__(None, None, None)


class HttpxTransport:
    """Default :class:`Transport` backed by pooled ``httpx`` clients."""

    def __init__(
        self,
        *,
        provider: Optional[str] = None,
        mock_transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._provider = provider
        self._mock = mock_transport

    def post_json(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> TransportResponse:
        client = get_httpx_client("chat", self._mock)
        try:
            resp = client.post(url, headers=dict(headers), json=payload)
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}", provider=self._provider, raw=exc) from exc
        return TransportResponse(resp.status_code, _decode_body(resp.text))

    def open_stream(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> TransportStream:
        client = get_httpx_client("stream", self._mock)
        ctx = client.stream("POST", url, headers=dict(headers), json=payload)
        try:
            response = ctx.__enter__()
        except httpx.HTTPError as exc:
            raise TransportError(f"stream open failed: {exc}", provider=self._provider, raw=exc) from exc
        return _HttpxStream(ctx, response, self._provider)


__all__ = [
    "Transport",
    "TransportResponse",
    "TransportStream",
    "HttpxTransport",
    "get_httpx_client",
    "close_all_clients",
]
