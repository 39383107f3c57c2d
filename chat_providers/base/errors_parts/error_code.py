"""
Normalized vendor error kinds (taxonomy).

Defines the `VendorErrorKind` enumeration used when a vendor answers with a
well-formed failure body (rate limit, auth, invalid request, ...). Values are
lowercase snake_case and are considered a stable public contract for logging
and for caller-side retry policies.
"""
from __future__ import annotations

from enum import Enum


class VendorErrorKind(str, Enum):
    """Enumerated normalized vendor failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    OVERLOADED = "overloaded"
    SERVER_ERROR = "server_error"
    CONTENT_FILTER = "content_filter"
    UNKNOWN = "unknown"


__all__ = ["VendorErrorKind"]
