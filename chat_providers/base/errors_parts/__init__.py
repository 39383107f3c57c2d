"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `chat_providers.base.errors` for the stable surface.
"""

from .error_code import VendorErrorKind
from .provider_error import (
    ChatProviderError,
    ConfigurationError,
    DecodeError,
    RequestInFlightError,
    TransportError,
    UnsupportedCapabilityError,
    ValidationError,
    VendorError,
)
from .classification import classify_status, classify_type, vendor_error_from_body

__all__ = [
    "VendorErrorKind",
    "ChatProviderError",
    "ValidationError",
    "ConfigurationError",
    "UnsupportedCapabilityError",
    "TransportError",
    "VendorError",
    "DecodeError",
    "RequestInFlightError",
    "classify_status",
    "classify_type",
    "vendor_error_from_body",
]
