"""Unit tests for vendor error classification.

Covers:
- HTTP status mapping including unlisted 4xx/5xx fallbacks
- Vendor type strings taking precedence over the status
- Message extraction from the common body shapes
"""

from __future__ import annotations

import pytest

from chat_providers.base.errors import (
    ChatProviderError,
    VendorError,
    VendorErrorKind,
    classify_status,
    classify_type,
    vendor_error_from_body,
)


@pytest.mark.parametrize(
    "status,kind",
    [
        (400, VendorErrorKind.INVALID_REQUEST),
        (401, VendorErrorKind.AUTH),
        (403, VendorErrorKind.AUTH),
        (404, VendorErrorKind.NOT_FOUND),
        (418, VendorErrorKind.INVALID_REQUEST),
        (429, VendorErrorKind.RATE_LIMIT),
        (500, VendorErrorKind.SERVER_ERROR),
        (503, VendorErrorKind.OVERLOADED),
        (529, VendorErrorKind.OVERLOADED),
        (599, VendorErrorKind.SERVER_ERROR),
        (None, VendorErrorKind.UNKNOWN),
    ],
)
def test_classify_status(status, kind):
    assert classify_status(status) is kind  # nosec B101 - test assertion


def test_classify_type_hints():
    assert classify_type("rate_limit_error") is VendorErrorKind.RATE_LIMIT  # nosec B101 - test assertion
    assert classify_type("RESOURCE_EXHAUSTED") is VendorErrorKind.RATE_LIMIT  # nosec B101 - test assertion
    assert classify_type("overloaded_error") is VendorErrorKind.OVERLOADED  # nosec B101 - test assertion
    assert classify_type("invalid_request_error") is VendorErrorKind.INVALID_REQUEST  # nosec B101
    assert classify_type("something_new") is None  # nosec B101 - test assertion
    assert classify_type(None) is None  # nosec B101 - test assertion


def test_vendor_error_from_openai_body():
    body = {"error": {"message": "Rate limit reached", "type": "rate_limit_exceeded"}}
    err = vendor_error_from_body(400, body, provider="openai")
    assert isinstance(err, VendorError) and isinstance(err, ChatProviderError)  # nosec B101
    assert err.kind is VendorErrorKind.RATE_LIMIT  # nosec B101 - test assertion
    assert err.to_dict() == {"kind": "rate_limit", "vendor_message": "Rate limit reached"}  # nosec B101
    assert err.status == 400  # nosec B101 - test assertion
    assert str(err).startswith("openai: ")  # nosec B101 - test assertion


def test_vendor_error_from_gemini_body():
    body = {"error": {"code": 403, "message": "API key not valid", "status": "PERMISSION_DENIED"}}
    err = vendor_error_from_body(403, body, provider="gemini")
    assert err.kind is VendorErrorKind.AUTH  # nosec B101 - test assertion
    assert err.vendor_message == "API key not valid"  # nosec B101 - test assertion


@pytest.mark.parametrize(
    "body,message",
    [
        ({"error": "model not loaded"}, "model not loaded"),
        ({"message": "invalid api token"}, "invalid api token"),
        ("upstream exploded", "upstream exploded"),
        (None, "HTTP 502"),
    ],
)
def test_vendor_error_message_shapes(body, message):
    err = vendor_error_from_body(502, body)
    assert err.vendor_message == message  # nosec B101 - test assertion
    assert err.kind is VendorErrorKind.SERVER_ERROR  # nosec B101 - test assertion
