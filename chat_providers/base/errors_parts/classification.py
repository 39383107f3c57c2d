"""
Vendor error classification helpers.

Maps HTTP status codes and vendor-reported error type strings to normalized
:class:`VendorErrorKind` values, and pulls a human-readable message out of the
common error body shapes (``{"error": {"message": ...}}``,
``{"error": "..."}``, ``{"message": ...}``). Adapters call
:func:`vendor_error_from_body` from their ``parse_error`` hook and may
override it for vendor-specific bodies.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .error_code import VendorErrorKind
from .provider_error import VendorError


_HTTP_STATUS_MAP: Dict[int, VendorErrorKind] = {
    400: VendorErrorKind.INVALID_REQUEST,
    401: VendorErrorKind.AUTH,
    403: VendorErrorKind.AUTH,
    404: VendorErrorKind.NOT_FOUND,
    413: VendorErrorKind.INVALID_REQUEST,
    422: VendorErrorKind.INVALID_REQUEST,
    429: VendorErrorKind.RATE_LIMIT,
    500: VendorErrorKind.SERVER_ERROR,
    502: VendorErrorKind.SERVER_ERROR,
    503: VendorErrorKind.OVERLOADED,
    504: VendorErrorKind.SERVER_ERROR,
    529: VendorErrorKind.OVERLOADED,
}


# Vendor error "type"/"status" strings, lower-cased.
_TYPE_HINTS = (
    (VendorErrorKind.RATE_LIMIT, ("rate_limit", "resource_exhausted", "too_many_requests")),
    (VendorErrorKind.AUTH, ("authentication", "permission", "unauthenticated", "invalid_api_key", "auth")),
    (VendorErrorKind.OVERLOADED, ("overloaded", "unavailable")),
    (VendorErrorKind.NOT_FOUND, ("not_found",)),
    (VendorErrorKind.CONTENT_FILTER, ("content_filter", "safety", "blocked")),
    (VendorErrorKind.INVALID_REQUEST, ("invalid_request", "invalid_argument", "failed_precondition", "bad_request")),
    (VendorErrorKind.SERVER_ERROR, ("api_error", "internal", "server_error")),
)


def classify_status(status: Optional[int]) -> VendorErrorKind:
    """Classify an HTTP status into a :class:`VendorErrorKind`."""
    if status is None:
        return VendorErrorKind.UNKNOWN
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if 400 <= status < 500:
        return VendorErrorKind.INVALID_REQUEST
    if status >= 500:
        return VendorErrorKind.SERVER_ERROR
    return VendorErrorKind.UNKNOWN


def classify_type(error_type: Optional[str]) -> Optional[VendorErrorKind]:
    """Map a vendor error type string (``"rate_limit_error"``, ``"RESOURCE_EXHAUSTED"``)."""
    if not error_type:
        return None
    lowered = str(error_type).lower()
    for kind, hints in _TYPE_HINTS:
        if any(h in lowered for h in hints):
            return kind
    return None


def extract_error_fields(body: Any) -> tuple[Optional[str], Optional[str]]:
    """Return ``(message, type)`` from a vendor error body, if recognizable."""
    if isinstance(body, str):
        return (body.strip() or None), None
    if not isinstance(body, dict):
        return None, None
    err = body.get("error")
    if isinstance(err, dict):
        message = err.get("message")
        etype = err.get("type") or err.get("status") or err.get("code")
        return (str(message) if message else None), (str(etype) if etype else None)
    if isinstance(err, str):
        return err, body.get("type") if isinstance(body.get("type"), str) else None
    message = body.get("message") or body.get("detail")
    return (str(message) if message else None), None


def vendor_error_from_body(
    status: Optional[int],
    body: Any,
    *,
    provider: Optional[str] = None,
) -> VendorError:
    """Build a :class:`VendorError` from an HTTP status and decoded body.

    The vendor type string wins over the status mapping when it is more
    specific (e.g. a 400 carrying a safety block is a content filter).
    """
    message, etype = extract_error_fields(body)
    kind = classify_type(etype) or classify_status(status)
    if message is None:
        message = f"HTTP {status}" if status is not None else "vendor reported an error"
    return VendorError(kind, message, provider=provider, status=status)


__all__ = [
    "classify_status",
    "classify_type",
    "extract_error_fields",
    "vendor_error_from_body",
    "_HTTP_STATUS_MAP",
]
