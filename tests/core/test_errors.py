"""Error Taxonomy — tests for StructuredError and its constructors.

Tests cover:
    - Every status class maps to exactly one HTTP status
    - Constructors prefill status class, code, and message; all overridable
    - Empty code rejected at construction
    - Errors are read-only after construction
    - to_response omits details when there are none
"""

import pytest

from crudframe.core.errors import (
    DEFAULT_CODES,
    INTERNAL_ERROR_MESSAGE,
    VALIDATION_ERROR_CODE,
    FieldError,
    StatusClass,
    StructuredError,
    bad_request,
    conflict,
    forbidden,
    internal,
    internal_error_response,
    not_found,
    unauthorized,
    validation_error,
)


# ─── status mapping ─────────────────────────────────────────────

@pytest.mark.parametrize("status_class, expected", [
    (StatusClass.BAD_REQUEST, 400),
    (StatusClass.UNAUTHORIZED, 401),
    (StatusClass.FORBIDDEN, 403),
    (StatusClass.NOT_FOUND, 404),
    (StatusClass.CONFLICT, 409),
    (StatusClass.INTERNAL, 500),
])
def test_status_class_maps_to_http_status(status_class, expected):
    assert status_class.http_status == expected


def test_every_status_class_has_default_code():
    assert set(DEFAULT_CODES) == set(StatusClass)


def test_only_internal_is_server_error():
    assert [s for s in StatusClass if not s.is_client_error] == [StatusClass.INTERNAL]


# ─── constructors ───────────────────────────────────────────────

@pytest.mark.parametrize("factory, code, status", [
    (bad_request, "BAD_REQUEST", 400),
    (unauthorized, "UNAUTHORIZED", 401),
    (forbidden, "FORBIDDEN", 403),
    (not_found, "NOT_FOUND", 404),
    (conflict, "CONFLICT", 409),
    (internal, "INTERNAL_ERROR", 500),
])
def test_constructor_defaults(factory, code, status):
    error = factory()
    assert error.code == code
    assert error.http_status == status
    assert error.message


def test_constructor_overrides_code_and_message():
    error = conflict("Post is already published", code="ALREADY_PUBLISHED")
    assert error.code == "ALREADY_PUBLISHED"
    assert error.message == "Post is already published"
    assert error.status_class is StatusClass.CONFLICT
    assert str(error) == "Post is already published"


def test_validation_error_carries_all_details():
    error = validation_error([
        FieldError("name", "required"),
        FieldError("price", "must be ≥ 0"),
    ])
    assert error.code == VALIDATION_ERROR_CODE
    assert error.http_status == 400
    assert [d.field for d in error.details] == ["name", "price"]


def test_empty_code_rejected():
    with pytest.raises(ValueError):
        StructuredError("boom", StatusClass.BAD_REQUEST, code="")


def test_error_is_read_only():
    error = not_found()
    with pytest.raises(AttributeError):
        error.code = "OTHER"
    assert isinstance(error.details, tuple)


# ─── serialization ──────────────────────────────────────────────

def test_to_response_without_details():
    assert forbidden("Nope").to_response() == {
        "error": {"code": "FORBIDDEN", "message": "Nope"},
    }


def test_to_response_with_details():
    error = bad_request(details=[FieldError("title", "required")])
    assert error.to_response()["error"]["details"] == [
        {"field": "title", "message": "required"},
    ]


def test_internal_error_response_is_fixed():
    assert internal_error_response() == {
        "error": {"code": "INTERNAL_ERROR", "message": INTERNAL_ERROR_MESSAGE},
    }
