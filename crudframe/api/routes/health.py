"""Probe Routes — liveness and readiness, enveloped and wrapped like every other route.

Invariants:
    - GET /health/ → 200 {"data": {"status": "healthy", ...}} while the process serves requests
    - GET /health/ready → 200 when the data store answers, otherwise 500 DATABASE_UNAVAILABLE
      through the boundary wrapper (same error envelope as any other failure)

Design Decisions:
    - Readiness failure raised as a StructuredError rather than a bespoke 503 body:
      orchestrators only read the non-2xx status, clients get the usual envelope
"""

from fastapi import APIRouter

from crudframe.api.boundary import with_http_error
from crudframe.api.responses import ok
from crudframe.core.errors import internal
from crudframe.infrastructure import database

DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
SERVICE_VERSION = "0.1.0"

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
@with_http_error
async def liveness():
    return ok({"status": "healthy", "service": "crudframe-api", "version": SERVICE_VERSION})


@router.get("/ready")
@with_http_error
async def readiness():
    """Ready once the storage pool can run a trivial query."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        raise internal("Database unavailable", code=DATABASE_UNAVAILABLE)
    return ok({"status": "ready", "checks": {"database": "healthy"}})
