"""Request dispatcher: one entry point from a thread to canonical deltas.

``send(thread)`` validates and translates synchronously, so validation,
configuration and capability errors surface from ``send`` itself before any
network I/O. The returned :class:`ResponseHandle` is a lazy iterator: the
transport call starts on first iteration and deltas are yielded in strict
arrival order.

Outcomes
--------
* ``COMPLETED``: the assembled messages are appended to the thread as a new
  turn (one message per choice).
* ``ABORTED``: ``abort()`` was called; the transport stream is closed,
  emission stops, and the thread is left untouched. Not an error.
* ``FAILED``: a transport, vendor or decode error ended the request. Deltas
  already yielded stay with the caller; the thread is untouched; the error is
  raised from the iterator and kept on ``handle.error``.

Only one request per thread key is outstanding at a time. Under the default
``"abort"`` policy a new ``send`` aborts the previous request; under
``"reject"`` it raises :class:`RequestInFlightError`.
"""
from __future__ import annotations

import threading
import uuid
from enum import Enum
from typing import Any, Dict, Iterator, List, Literal, Optional, Sequence

from .adapter import ChatAdapter
from .cancellation import CancellationToken
from .errors_parts.provider_error import (
    ChatProviderError,
    ConfigurationError,
    DecodeError,
    RequestInFlightError,
    TransportError,
    VendorError,
)
from .http.client import HttpxTransport, Transport
from .logging import LogContext, get_logger, log_event, normalized_log_event
from .models_parts.canonical_delta import CanonicalDelta
from .models_parts.message import Message
from .models_parts.thread import Thread
from .registry import AdapterRegistry
from .streaming.assembler import StreamAssembler
from .streaming.metrics import StreamMetrics

InFlightPolicy = Literal["abort", "reject"]


class RequestStatus(str, Enum):
    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"


_TERMINAL = frozenset({RequestStatus.COMPLETED, RequestStatus.ABORTED, RequestStatus.FAILED})


class ResponseHandle:
    """Iterator over one request's canonical deltas, with cooperative abort.

    Attributes:
        request_id: Random id used in log events.
        stream: Whether the request actually streams (False when the adapter
            lacks streaming and the request was degraded).
        metrics: Emission count and timings.
    """

    def __init__(
        self,
        *,
        dispatcher: "RequestDispatcher",
        thread: Thread,
        adapter: ChatAdapter,
        transport: Transport,
        url: str,
        headers: Dict[str, str],
        payload: Dict[str, Any],
        stream: bool,
        ctx: LogContext,
    ) -> None:
        self._dispatcher = dispatcher
        self._thread = thread
        self._adapter = adapter
        self._transport = transport
        self._url = url
        self._headers = headers
        self._payload = payload
        self.stream = stream
        self._ctx = ctx
        self._logger = dispatcher.logger
        self._token = CancellationToken()
        self._lock = threading.Lock()
        self._status = RequestStatus.PENDING
        self._error: Optional[ChatProviderError] = None
        self._messages: List[Message] = []
        self._assembler = StreamAssembler(provider=adapter.name)
        self._iterator: Optional[Iterator[CanonicalDelta]] = None
        self.metrics = StreamMetrics()
        self.request_id = ctx.request_id

    # ----- public surface -------------------------------------------------
    @property
    def status(self) -> RequestStatus:
        return self._status

    @property
    def error(self) -> Optional[ChatProviderError]:
        return self._error

    @property
    def done(self) -> bool:
        return self._status in _TERMINAL

    @property
    def adapter(self) -> ChatAdapter:
        return self._adapter

    @property
    def payload(self) -> Dict[str, Any]:
        """The vendor payload built at send time."""
        return self._payload

    @property
    def messages(self) -> List[Message]:
        """Messages committed to the thread (empty unless ``COMPLETED``)."""
        return list(self._messages)

    def __iter__(self) -> Iterator[CanonicalDelta]:
        if self._iterator is None:
            self._iterator = self._run()
        return self._iterator

    def result(self) -> List[Message]:
        """Drain the handle and return the committed messages.

        Returns an empty list when aborted; re-raises the error when failed.
        """
        for _ in self:
            pass
        if self._error is not None:
            raise self._error
        return self.messages

    def abort(self, reason: str = "aborted by caller") -> bool:
        """Cancel the request. Idempotent; a no-op once the request has ended.

        Returns True only for the call that actually aborted.
        """
        with self._lock:
            if self._status in _TERMINAL:
                return False
            self._status = RequestStatus.ABORTED
        self._token.cancel(reason)
        normalized_log_event(
            self._logger,
            "request.abort",
            self._ctx,
            phase="abort",
            emitted=self.metrics.emitted,
            duration_ms=self.metrics.finish(),
            reason=reason,
        )
        self._dispatcher._release(self._thread.key, self)
        return True

    # ----- internals ------------------------------------------------------
    def _set_status(self, status: RequestStatus) -> bool:
        with self._lock:
            if self._status in _TERMINAL:
                return False
            self._status = status
            return True

    def _emit(self, delta: CanonicalDelta) -> CanonicalDelta:
        self._assembler.add(delta)
        if self.metrics.record_delta():
            log_event(
                self._logger,
                "stream.first_delta",
                self._ctx,
                time_to_first_delta_ms=round(self.metrics.time_to_first_delta_ms or 0.0, 2),
            )
        return delta

    def _deltas(self) -> Iterator[CanonicalDelta]:
        if not self.stream:
            response = self._transport.post_json(self._url, self._headers, self._payload)
            if self._token.cancelled:
                return
            if not response.ok or self._adapter.is_error_body(response.data):
                raise self._adapter.parse_error(response.status_code, response.data)
            yield self._adapter.from_response(response.data)
            return

        stream = self._transport.open_stream(self._url, self._headers, self._payload)
        self._token.on_cancel(stream.close)
        try:
            if stream.status_code >= 400:
                raise self._adapter.parse_error(stream.status_code, stream.read_json())
            for line in stream.iter_lines():
                if self._token.cancelled:
                    return
                delta = self._adapter.to_stream_chunk(line)
                if delta is None:
                    continue
                yield delta
                if delta.done:
                    return
        finally:
            stream.close()

    def _run(self) -> Iterator[CanonicalDelta]:
        if not self._set_status(RequestStatus.STREAMING):
            return
        try:
            for delta in self._deltas():
                if self._token.cancelled:
                    return
                yield self._emit(delta)
                if self._token.cancelled:
                    return
            if self._token.cancelled:
                return
            self._commit()
        except ChatProviderError as exc:
            if not self._token.cancelled:
                self._fail(exc)
                raise
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as exc:
            if not self._token.cancelled:
                err = DecodeError(f"malformed vendor output: {exc!r}", provider=self._adapter.name)
                self._fail(err)
                raise err from exc
        except GeneratorExit:
            self.abort("iteration closed by caller")
            raise
        except Exception as exc:
            if not self._token.cancelled:
                err = TransportError(f"request failed: {exc!r}", provider=self._adapter.name, raw=exc)
                self._fail(err)
                raise err from exc

    def _commit(self) -> None:
        try:
            messages = self._assembler.messages(turn_index=len(self._thread.turns))
        except DecodeError as exc:
            self._fail(exc)
            raise
        with self._lock:
            if self._status in _TERMINAL:
                return
            if messages:
                self._thread.add_turn(messages)
            self._messages = messages
            self._status = RequestStatus.COMPLETED
        normalized_log_event(
            self._logger,
            "request.end",
            self._ctx,
            phase="finalize",
            emitted=self.metrics.emitted,
            duration_ms=self.metrics.finish(),
            choices=len(messages),
            finish_reason=self._assembler.finish_reason(0),
        )
        self._dispatcher._release(self._thread.key, self)

    def _fail(self, exc: ChatProviderError) -> None:
        if not self._set_status(RequestStatus.FAILED):
            return
        self._error = exc
        kind = exc.kind.value if isinstance(exc, VendorError) else type(exc).__name__
        normalized_log_event(
            self._logger,
            "request.error",
            self._ctx,
            phase="mid_stream" if self.metrics.emitted else "start",
            error_kind=kind,
            emitted=self.metrics.emitted,
            duration_ms=self.metrics.finish(),
            error=exc.message,
        )
        self._dispatcher._release(self._thread.key, self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"ResponseHandle(id={self.request_id}, status={self._status.value}, emitted={self.metrics.emitted})"


class RequestDispatcher:
    """Sends threads through the active adapter and a transport.

    Parameters:
        registry: Source of the active adapter (captured per request).
        transport: HTTP collaborator; defaults to :class:`HttpxTransport`.
        policy: ``"abort"`` (default) or ``"reject"`` for a second request on
            a thread that still has one outstanding.
    """

    def __init__(
        self,
        registry: Optional[AdapterRegistry] = None,
        transport: Optional[Transport] = None,
        *,
        policy: InFlightPolicy = "abort",
    ) -> None:
        if policy not in ("abort", "reject"):
            raise ConfigurationError(f"unknown in-flight policy {policy!r}")
        self._registry = registry if registry is not None else AdapterRegistry()
        self._transport = transport if transport is not None else HttpxTransport()
        self._policy = policy
        self._lock = threading.Lock()
        self._inflight: Dict[str, ResponseHandle] = {}
        self.logger = get_logger("chat_providers.dispatcher")

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def in_flight(self, thread: Thread) -> Optional[ResponseHandle]:
        with self._lock:
            return self._inflight.get(thread.key)

    def send(self, thread: Thread, *, stream: bool = True, adapter: Optional[ChatAdapter] = None) -> ResponseHandle:
        """Translate ``thread`` and return a lazy handle over the response.

        Raises:
            ValidationError: malformed canonical content.
            ConfigurationError: unknown or unconfigured adapter.
            UnsupportedCapabilityError: tools, images or multiple choices the
                adapter does not support.
            RequestInFlightError: under the ``"reject"`` policy.
        """
        adapter = adapter or self._registry.active()
        messages: Sequence[Message] = tuple(thread.messages())
        config = thread.config
        tools = thread.tools
        effective_stream = adapter.check_request(messages, config, tools, stream=stream)
        payload = adapter.to_request(messages, config, tools, stream=effective_stream)
        url = adapter.endpoint(effective_stream)
        headers = adapter.headers()
        ctx = LogContext(
            provider=adapter.name,
            model=adapter.model,
            thread=thread.key,
            request_id=uuid.uuid4().hex,
        )
        handle = ResponseHandle(
            dispatcher=self,
            thread=thread,
            adapter=adapter,
            transport=self._transport,
            url=url,
            headers=headers,
            payload=payload,
            stream=effective_stream,
            ctx=ctx,
        )

        with self._lock:
            previous = self._inflight.get(thread.key)
            if previous is not None and not previous.done and self._policy == "reject":
                raise RequestInFlightError(
                    f"thread {thread.key!r} already has request {previous.request_id} in flight",
                    provider=adapter.name,
                )
            self._inflight[thread.key] = handle
        if previous is not None and not previous.done:
            previous.abort("superseded by a new request")

        normalized_log_event(
            self.logger,
            "request.start",
            ctx,
            phase="start",
            stream=effective_stream,
            stream_requested=stream,
            messages=len(messages),
            tools=len(tools),
        )
        return handle

    def abort(self, handle: ResponseHandle) -> bool:
        return handle.abort()

    def _release(self, key: str, handle: ResponseHandle) -> None:
        with self._lock:
            if self._inflight.get(key) is handle:
                del self._inflight[key]


__all__ = ["RequestDispatcher", "ResponseHandle", "RequestStatus", "InFlightPolicy"]
