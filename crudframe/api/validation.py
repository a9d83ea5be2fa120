"""Validation Adapter — parse untrusted input against a declared shape into typed data or a 400.

Invariants:
    - Returns Success(data) or Failure(response), never both, never raises for bad input
    - A Failure lists EVERY failing field in details, never just the first
    - Failure responses are built by api/responses.error_response — handlers return them
      verbatim, so the validation error format has a single source
    - Pure: reads the request, touches nothing else

Design Decisions:
    - Shapes are pydantic models: declared once, parser derived (no hand-written checks)
    - Parser messages rewritten to short human phrasings ("required", "must be ≥ 0");
      unknown error types keep pydantic's own message
    - Repeated query keys become lists, single keys stay scalars
    - FastAPI's RequestValidationError goes through build_validation_failure too
"""

import json
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Mapping, Sequence, TypeVar, Union

from fastapi import Request
from fastapi.responses import Response
from pydantic import BaseModel, ValidationError
from starlette.datastructures import QueryParams

from crudframe.api.responses import error_response
from crudframe.core.errors import FieldError, bad_request, validation_error

M = TypeVar("M", bound=BaseModel)

ROOT_FIELD = "_root"
# FastAPI prefixes loc with where the value came from; our details name the field only
_REQUEST_SOURCES = {"body", "query", "path", "header", "cookie"}


@dataclass(frozen=True)
class Success(Generic[M]):
    data: M


@dataclass(frozen=True)
class Failure:
    response: Response


ValidationResult = Union[Success[M], Failure]


# ─── Error Formatting ───────────────────────────────────────────

_TYPE_MESSAGES = {
    "missing": "required",
    "int_type": "must be an integer",
    "int_parsing": "must be an integer",
    "int_from_float": "must be an integer",
    "float_type": "must be a number",
    "float_parsing": "must be a number",
    "bool_type": "must be a boolean",
    "bool_parsing": "must be a boolean",
    "string_type": "must be a string",
    "uuid_type": "must be a valid UUID",
    "uuid_parsing": "must be a valid UUID",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "dict_type": "must be an object",
    "list_type": "must be a list",
}


def _bound(value: Any) -> Any:
    # pydantic reports float bounds as 0.0; show them as written
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _describe(error: Mapping[str, Any]) -> str:
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    if kind in _TYPE_MESSAGES:
        return _TYPE_MESSAGES[kind]
    if kind == "greater_than_equal":
        return f"must be ≥ {_bound(ctx.get('ge'))}"
    if kind == "greater_than":
        return f"must be > {_bound(ctx.get('gt'))}"
    if kind == "less_than_equal":
        return f"must be ≤ {_bound(ctx.get('le'))}"
    if kind == "less_than":
        return f"must be < {_bound(ctx.get('lt'))}"
    if kind == "string_too_short":
        return f"must be at least {ctx.get('min_length')} characters"
    if kind == "string_too_long":
        return f"must be at most {ctx.get('max_length')} characters"
    if kind == "too_short":
        return f"must contain at least {ctx.get('min_length')} items"
    if kind == "too_long":
        return f"must contain at most {ctx.get('max_length')} items"
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return str(error.get("msg", "is invalid"))


def _field_path(loc: Sequence[Any], strip_source: bool) -> str:
    parts = list(loc)
    if strip_source and parts and parts[0] in _REQUEST_SOURCES:
        parts = parts[1:]
    return ".".join(str(p) for p in parts) or ROOT_FIELD


def field_errors(
    errors: Iterable[Mapping[str, Any]], strip_source: bool = False,
) -> list[FieldError]:
    """One FieldError per parser error — nothing merged, nothing dropped."""
    return [
        FieldError(
            field=_field_path(e.get("loc", ()), strip_source),
            message=_describe(e),
        )
        for e in errors
    ]


def build_validation_failure(
    errors: Iterable[Mapping[str, Any]],
    message: str = "Validation failed",
    strip_source: bool = False,
) -> Response:
    return error_response(
        validation_error(field_errors(errors, strip_source), message=message),
    )


# ─── Adapter Operations ─────────────────────────────────────────

def _parse(data: Any, shape: type[M], message: str) -> ValidationResult[M]:
    try:
        return Success(shape.model_validate(data))
    except ValidationError as e:
        return Failure(
            build_validation_failure(e.errors(include_url=False), message),
        )


async def validate_body(request: Request, shape: type[M]) -> ValidationResult[M]:
    """Parse the JSON request body."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return Failure(error_response(bad_request("Invalid JSON")))
    return _parse(body, shape, "Validation failed")


def validate_params(params: Mapping[str, Any], shape: type[M]) -> ValidationResult[M]:
    """Parse path parameters (request.path_params)."""
    return _parse(dict(params), shape, "Invalid parameters")


def validate_search_params(request: Request, shape: type[M]) -> ValidationResult[M]:
    """Parse the query string."""
    return _parse(
        _query_dict(request.query_params), shape, "Invalid query parameters",
    )


def _query_dict(query_params: QueryParams) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key in query_params.keys():
        values = query_params.getlist(key)
        data[key] = values[0] if len(values) == 1 else values
    return data
