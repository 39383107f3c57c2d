"""Unified chat provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``chat_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import VendorErrorKind
from .errors_parts.provider_error import (
    ChatProviderError,
    ConfigurationError,
    DecodeError,
    RequestInFlightError,
    TransportError,
    UnsupportedCapabilityError,
    ValidationError,
    VendorError,
)
from .errors_parts.classification import classify_status, classify_type, vendor_error_from_body

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
