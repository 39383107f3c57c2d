"""Cooperative cancellation token.

The dispatcher hands one token to each request. ``cancel`` flips the flag
once, then runs registered callbacks (the transport stream's ``close``) so a
reader blocked on network I/O is released.
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List

from .cancelled_error import CancelledError
from .state import State


class CancellationToken:
    """Thread-safe cancellation flag with close-on-cancel callbacks.

    ``cancel`` is idempotent: only the first call records a reason and runs
    callbacks. Callbacks registered after cancellation run immediately.
    """

    def __init__(self) -> None:
        self._state = State()
        self._lock = Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> bool:
        """Request cancellation. Returns True only for the call that cancelled."""
        with self._lock:
            if self._state.cancelled:
                return False
            self._state.cancelled = True
            self._state.reason = reason
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback()
        return True

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to run once when the token is cancelled."""
        with self._lock:
            if not self._state.cancelled:
                self._callbacks.append(callback)
                return
        callback()

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if the token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._state.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancellationToken"]
