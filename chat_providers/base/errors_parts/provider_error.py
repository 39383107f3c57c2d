"""
Structured exception types for the canonical chat layer.

Every failure surfaced by the core derives from :class:`ChatProviderError` so
callers can catch one base type while still distinguishing the fail-fast
errors (validation, configuration, capability) from in-flight ones
(transport, vendor, decode).
"""
from __future__ import annotations

from typing import Any, Optional

from .error_code import VendorErrorKind


class ChatProviderError(Exception):
    """Base error carrying the adapter name where the failure originated.

    Attributes:
        message: Human-readable error message suitable for logging.
        provider: Adapter key (e.g. ``"gemini"``) or ``None`` when raised
            before an adapter was resolved.
    """

    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider and message."""
        return f"{self.provider or '-'}: {self.message}"


class ValidationError(ChatProviderError):
    """Malformed canonical input (bad content shape, unknown role, ...)."""


class ConfigurationError(ChatProviderError):
    """Unknown or unconfigured adapter name, or invalid adapter settings."""


class UnsupportedCapabilityError(ChatProviderError):
    """The request needs a capability the active adapter does not advertise."""

    def __init__(self, message: str, *, provider: Optional[str] = None, capability: Any = None) -> None:
        super().__init__(message, provider=provider)
        self.capability = capability


class TransportError(ChatProviderError):
    """Network or connection failure reported by the transport collaborator."""

    def __init__(self, message: str, *, provider: Optional[str] = None, raw: Optional[BaseException] = None) -> None:
        super().__init__(message, provider=provider)
        self.raw = raw


class VendorError(ChatProviderError):
    """A well-formed vendor response that reports a failure.

    Attributes:
        kind: Normalized :class:`VendorErrorKind`.
        vendor_message: The vendor's own error text, unmodified.
        status: HTTP status code when the failure came with one.
    """

    def __init__(
        self,
        kind: VendorErrorKind,
        vendor_message: str,
        *,
        provider: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(f"{kind.value}: {vendor_message}", provider=provider)
        self.kind = kind
        self.vendor_message = vendor_message
        self.status = status

    def to_dict(self) -> dict:
        """Return the normalized ``{kind, vendor_message}`` view of the error."""
        return {"kind": self.kind.value, "vendor_message": self.vendor_message}


class DecodeError(ChatProviderError):
    """Vendor output is missing fields needed to build a canonical delta."""


class RequestInFlightError(ChatProviderError):
    """A thread already has an outstanding request and the policy rejects a new one."""


__all__ = [
    "ChatProviderError",
    "ValidationError",
    "ConfigurationError",
    "UnsupportedCapabilityError",
    "TransportError",
    "VendorError",
    "DecodeError",
    "RequestInFlightError",
]
