"""Error Handlers — app-level safety net for errors raised outside a wrapped handler body.

Invariants:
    - StructuredError → same envelope as the boundary wrapper (api/responses.error_response)
    - RequestValidationError → same VALIDATION_ERROR envelope as the Validation Adapter
    - Exception (catch-all) → fixed INTERNAL_ERROR, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (StructuredError), validation (FastAPI), catch-all (Exception)
    - Covers dependencies and middleware, which run outside with_http_error; handlers
      themselves are always wrapped, so these rarely fire
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from crudframe.api.responses import error_response, internal_error
from crudframe.api.validation import build_validation_failure
from crudframe.core.errors import StructuredError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_structured_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_structured_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StructuredError)
    async def structured_error_handler(request: Request, exc: StructuredError):
        """Handle StructuredErrors raised by dependencies."""
        logger.warning(
            f"StructuredError outside handler: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return error_response(exc)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle FastAPI parameter validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}",
            extra={"path": request.url.path, "error_code": "VALIDATION_ERROR"},
        )
        return build_validation_failure(exc.errors(), strip_source=True)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return internal_error()
