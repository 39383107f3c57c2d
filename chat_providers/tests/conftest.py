"""Pytest configuration for the chat_providers test suite.

Provides an in-memory transport (no network), a structured-event capture on
the ``chat_providers`` logger, and cache resets so environment-dependent
configuration never leaks between tests.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import pytest

from chat_providers.base.http.client import TransportResponse
from chat_providers.base.logging import ROOT_LOGGER, get_logger
from chat_providers.base.timeouts import reset_timeout_cache
from chat_providers.config import clear_config_cache


class FakeStream:
    """Scripted ``TransportStream``; an exception in ``lines`` is raised in place."""

    def __init__(self, lines: Sequence[Any], *, status_code: int = 200, body: Any = None) -> None:
        self.status_code = status_code
        self._lines = list(lines)
        self._body = body
        self.closed = False
        self.close_calls = 0
        self.consumed = 0

    def iter_lines(self) -> Iterator[str]:
        for line in self._lines:
            if self.closed:
                return
            if isinstance(line, BaseException):
                raise line
            self.consumed += 1
            yield line

    def read_json(self) -> Any:
        return self._body

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeTransport:
    """Records calls and replays a canned response or stream."""

    def __init__(self, *, response: Any = None, stream: Optional[FakeStream] = None) -> None:
        self.response = response
        self.stream = stream
        self.calls: List[Dict[str, Any]] = []

    def post_json(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> TransportResponse:
        self.calls.append({"kind": "post", "url": url, "headers": dict(headers), "payload": payload})
        if isinstance(self.response, BaseException):
            raise self.response
        return self.response

    def open_stream(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> FakeStream:
        self.calls.append({"kind": "stream", "url": url, "headers": dict(headers), "payload": payload})
        if isinstance(self.stream, BaseException):
            raise self.stream
        assert self.stream is not None  # nosec B101 - test harness guard
        return self.stream


class _EventHandler(logging.Handler):
    """Collect JSON event payloads emitted through ``log_event``."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            return
        if isinstance(payload, dict):
            payload["_level"] = record.levelname
            self.events.append(payload)


@pytest.fixture()
def fake_stream():
    """Factory fixture: ``fake_stream(lines, status_code=200, body=None)``."""
    return FakeStream


@pytest.fixture()
def fake_transport():
    """Factory fixture: ``fake_transport(response=..., stream=...)``."""
    return FakeTransport


@pytest.fixture()
def ok_response():
    """Factory fixture building a ``TransportResponse``."""

    def _make(data: Any, status_code: int = 200) -> TransportResponse:
        return TransportResponse(status_code, data)

    return _make


@pytest.fixture()
def events() -> Iterator[List[Dict[str, Any]]]:
    """Structured events logged under ``chat_providers`` during the test.

    The package logger does not propagate, so ``caplog`` cannot see it; a
    handler is attached directly instead.
    """
    logger = get_logger(ROOT_LOGGER)
    handler = _EventHandler()
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.events
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


@pytest.fixture(autouse=True)
def _reset_caches() -> Iterator[None]:
    clear_config_cache()
    reset_timeout_cache()
    yield
    clear_config_cache()
    reset_timeout_cache()
