"""Response Helpers — success envelopes and the single error-envelope serializer.

Invariants:
    - Success bodies are {"data": ...}; paginated bodies add {"pagination": {...}}
    - error_response() is the only function turning a StructuredError into an HTTP response
    - no_content() has an empty body

Design Decisions:
    - jsonable_encoder over model.model_dump(mode="json"): accepts models, ORM-free
      dicts, UUIDs and datetimes alike
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from crudframe.core.errors import StructuredError, internal_error_response
from crudframe.core.pagination import PaginatedResult


def ok(data: Any) -> JSONResponse:
    return JSONResponse({"data": jsonable_encoder(data)})


def created(data: Any) -> JSONResponse:
    return JSONResponse(
        {"data": jsonable_encoder(data)}, status_code=status.HTTP_201_CREATED,
    )


def no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def paginated(result: PaginatedResult) -> JSONResponse:
    return JSONResponse({
        "data": jsonable_encoder(list(result.items)),
        "pagination": result.meta(),
    })


def error_response(exc: StructuredError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=internal_error_response(),
    )
