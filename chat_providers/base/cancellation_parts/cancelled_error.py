"""Cancellation error type.

Raised by blocking operations that observe a cancelled token. Not a
``ChatProviderError``: an aborted request is not a failed one.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively."""


__all__ = ["CancelledError"]
