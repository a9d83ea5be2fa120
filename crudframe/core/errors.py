"""Error Taxonomy — StructuredError and one constructor per status class.

Invariants:
    - Every error has a non-empty code (str) and a StatusClass
    - StatusClass → HTTP status is a closed, exhaustive table
    - Errors are immutable after construction (read-only attributes, tuple details)
    - to_response() produces the REST error envelope: {error: {code, message, details?}}

Design Decisions:
    - Single StructuredError type over a subclass per failure: call sites mint
      domain codes (ALREADY_PUBLISHED) without growing the hierarchy (ADR: uniform error shape)
    - Constructors as module functions (bad_request, not_found, ...): read like intent
      at the raise site; services never mention HTTP status numbers
    - Unknown exceptions are deliberately NOT StructuredError — the boundary maps
      them to INTERNAL_ERROR without inspecting them
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class StatusClass(str, Enum):
    """The six status classes a StructuredError may carry."""
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]

    @property
    def is_client_error(self) -> bool:
        return self.http_status < 500


_HTTP_STATUS: dict[StatusClass, int] = {
    StatusClass.BAD_REQUEST: 400,
    StatusClass.UNAUTHORIZED: 401,
    StatusClass.FORBIDDEN: 403,
    StatusClass.NOT_FOUND: 404,
    StatusClass.CONFLICT: 409,
    StatusClass.INTERNAL: 500,
}

DEFAULT_CODES: dict[StatusClass, str] = {
    StatusClass.BAD_REQUEST: "BAD_REQUEST",
    StatusClass.UNAUTHORIZED: "UNAUTHORIZED",
    StatusClass.FORBIDDEN: "FORBIDDEN",
    StatusClass.NOT_FOUND: "NOT_FOUND",
    StatusClass.CONFLICT: "CONFLICT",
    StatusClass.INTERNAL: "INTERNAL_ERROR",
}

DEFAULT_MESSAGES: dict[StatusClass, str] = {
    StatusClass.BAD_REQUEST: "Bad request",
    StatusClass.UNAUTHORIZED: "Unauthorized",
    StatusClass.FORBIDDEN: "Forbidden",
    StatusClass.NOT_FOUND: "Not found",
    StatusClass.CONFLICT: "Conflict",
    StatusClass.INTERNAL: "Internal server error",
}

VALIDATION_ERROR_CODE = "VALIDATION_ERROR"

# Fixed, non-leaking body for anything that is not a StructuredError
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class FieldError:
    """One failing field: dotted path plus a human message."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class StructuredError(Exception):
    """Typed application error — the only error shape that crosses layer boundaries."""

    def __init__(
        self,
        message: str,
        status_class: StatusClass,
        code: str | None = None,
        details: Iterable[FieldError] | None = None,
    ):
        code = code if code is not None else DEFAULT_CODES[status_class]
        if not code:
            raise ValueError("StructuredError code must be a non-empty string")
        super().__init__(message)
        self._message = message
        self._status_class = status_class
        self._code = code
        self._details = tuple(details) if details else ()

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_class(self) -> StatusClass:
        return self._status_class

    @property
    def code(self) -> str:
        return self._code

    @property
    def details(self) -> tuple[FieldError, ...]:
        return self._details

    @property
    def http_status(self) -> int:
        return self._status_class.http_status

    def to_response(self) -> dict:
        """Convert to the standardized REST error envelope."""
        body: dict = {"code": self._code, "message": self._message}
        if self._details:
            body["details"] = [d.to_dict() for d in self._details]
        return {"error": body}

    def __repr__(self) -> str:
        return (
            f"StructuredError({self._status_class.value}, code={self._code!r}, "
            f"message={self._message!r}, details={len(self._details)})"
        )


# ─── Constructors ───────────────────────────────────────────────

def bad_request(
    message: str = DEFAULT_MESSAGES[StatusClass.BAD_REQUEST],
    code: str | None = None,
    details: Iterable[FieldError] | None = None,
) -> StructuredError:
    return StructuredError(message, StatusClass.BAD_REQUEST, code, details)


def validation_error(
    details: Iterable[FieldError],
    message: str = "Validation failed",
) -> StructuredError:
    """Bad request that enumerates every failing field."""
    return StructuredError(
        message, StatusClass.BAD_REQUEST, VALIDATION_ERROR_CODE, details,
    )


def unauthorized(
    message: str = DEFAULT_MESSAGES[StatusClass.UNAUTHORIZED],
    code: str | None = None,
) -> StructuredError:
    return StructuredError(message, StatusClass.UNAUTHORIZED, code)


def forbidden(
    message: str = DEFAULT_MESSAGES[StatusClass.FORBIDDEN],
    code: str | None = None,
) -> StructuredError:
    return StructuredError(message, StatusClass.FORBIDDEN, code)


def not_found(
    message: str = DEFAULT_MESSAGES[StatusClass.NOT_FOUND],
    code: str | None = None,
) -> StructuredError:
    return StructuredError(message, StatusClass.NOT_FOUND, code)


def conflict(
    message: str = DEFAULT_MESSAGES[StatusClass.CONFLICT],
    code: str | None = None,
    details: Iterable[FieldError] | None = None,
) -> StructuredError:
    return StructuredError(message, StatusClass.CONFLICT, code, details)


def internal(
    message: str = DEFAULT_MESSAGES[StatusClass.INTERNAL],
    code: str | None = None,
) -> StructuredError:
    return StructuredError(message, StatusClass.INTERNAL, code)


def internal_error_response() -> dict:
    """Envelope for unrecognized failures — never carries the original detail."""
    return {
        "error": {
            "code": DEFAULT_CODES[StatusClass.INTERNAL],
            "message": INTERNAL_ERROR_MESSAGE,
        },
    }
