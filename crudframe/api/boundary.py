"""Boundary Error Adapter — wraps every entry point and settles raised errors into HTTP responses.

Invariants:
    - Normal return passes through unchanged
    - StructuredError → its mapped status + {"error": {code, message, details?}}
    - Anything else → 500 INTERNAL_ERROR with a fixed message; the original goes to the
      log (with traceback), never to the caller
    - Applying the wrapper twice returns the already-wrapped handler
    - No retry, no blocking, no suspension: one call, one catch, one translation

Design Decisions:
    - Decorator over middleware: each handler is visibly wrapped at its definition, and
      unwrapped_routes() can prove coverage at startup
    - functools.wraps keeps the handler signature visible to FastAPI's dependency injection
    - If building the failure response itself fails, fall back to the fixed internal error
"""

import functools
import logging
from typing import Any, Awaitable, Callable

from fastapi import FastAPI
from fastapi.routing import APIRoute

from crudframe.api.responses import error_response, internal_error
from crudframe.core.errors import StructuredError

logger = logging.getLogger(__name__)

WRAPPED_ATTR = "__http_error_wrapped__"

Handler = Callable[..., Awaitable[Any]]


def with_http_error(handler: Handler) -> Handler:
    """Settle every invocation of handler into a response."""
    if is_wrapped(handler):
        return handler

    @functools.wraps(handler)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await handler(*args, **kwargs)
        except StructuredError as exc:
            return _settle_structured(handler, exc)
        except Exception:
            logger.error(
                f"Unhandled exception in {handler.__qualname__}",
                exc_info=True,
                extra={"operation": handler.__qualname__, "error_code": "INTERNAL_ERROR"},
            )
            return internal_error()

    setattr(wrapper, WRAPPED_ATTR, True)
    return wrapper


def _settle_structured(handler: Handler, exc: StructuredError):
    level = logging.WARNING if exc.status_class.is_client_error else logging.ERROR
    logger.log(
        level,
        f"{exc.code}: {exc.message}",
        exc_info=not exc.status_class.is_client_error,
        extra={
            "operation": handler.__qualname__,
            "error_code": exc.code,
            "status_code": exc.http_status,
        },
    )
    try:
        return error_response(exc)
    except Exception:
        logger.error(
            f"Failed to serialize {exc.code} response", exc_info=True,
        )
        return internal_error()


def is_wrapped(handler: Any) -> bool:
    return getattr(handler, WRAPPED_ATTR, False) is True


def unwrapped_routes(app: FastAPI) -> list[str]:
    """Entry points missing the boundary wrapper — must be empty."""
    return [
        f"{','.join(sorted(route.methods or ()))} {route.path}"
        for route in app.routes
        if isinstance(route, APIRoute) and not is_wrapped(route.endpoint)
    ]
