"""Errors — verifies the typed hierarchy and create_error mapping.

Invariants:
    - create_error returns the typed class for 400/401/403/404/409/500
    - 404 keeps the caller's message verbatim
    - Unknown codes still carry the requested status
"""

import pytest

from tradedesk.core.errors import (
    BadRequestError, ConflictError, DatabaseError, ErrorCategory, ErrorSeverity,
    ForbiddenError, InternalError, ResourceNotFoundError, TradeDeskError,
    UnauthorizedError, create_error,
)


@pytest.mark.parametrize("status, error_cls", [
    (400, BadRequestError),
    (401, UnauthorizedError),
    (403, ForbiddenError),
    (404, ResourceNotFoundError),
    (409, ConflictError),
    (500, InternalError),
])
def test_create_error_maps_status_to_type(status, error_cls):
    err = create_error(status, "boom")
    assert isinstance(err, error_cls)
    assert err.http_status == status


def test_create_error_404_keeps_message():
    err = create_error(404, "Offering not found")
    assert err.message == "Offering not found"
    assert str(err) == "Offering not found"


def test_create_error_unknown_status_is_generic():
    err = create_error(422, "Unprocessable")
    assert type(err) is TradeDeskError
    assert err.http_status == 422
    assert err.code == "HTTP_422"
    assert err.severity == ErrorSeverity.WARNING


def test_create_error_unknown_server_status_is_critical():
    assert create_error(502, "Upstream").severity == ErrorSeverity.CRITICAL


def test_to_response_envelope():
    body = BadRequestError("Insufficient balance").to_response()["error"]
    assert body["code"] == "BAD_REQUEST"
    assert body["message"] == "Insufficient balance"
    assert body["category"] == ErrorCategory.VALIDATION.value
    assert body["severity"] == "warning"
    assert body["status_code"] == 400
    assert "timestamp" in body


def test_resource_not_found_message_with_id():
    err = ResourceNotFoundError("Faq", "abc")
    assert err.message == "Faq 'abc' not found"
    assert err.resource_type == "Faq"


def test_database_error_is_503_and_not_client_error():
    err = DatabaseError("timeout", "select")
    assert err.http_status == 503
    assert err.message == "Database select failed: timeout"
    assert not err.is_client_error


def test_client_errors_flagged():
    assert ConflictError("dup").is_client_error
    assert not InternalError().is_client_error
