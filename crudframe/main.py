"""crudframe API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Every registered route is wrapped by with_http_error — startup fails otherwise
    - Global error handlers map StructuredError → structured JSON responses as a safety net
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Boundary coverage checked at import time: a forgotten wrapper is a crash in CI,
      not a leaked stack trace in production
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crudframe.api.boundary import unwrapped_routes
from crudframe.api.error_handlers import register_error_handlers
from crudframe.api.middleware import RequestIdMiddleware
from crudframe.api.routes import categories, health, posts
from crudframe.config import get_settings
from crudframe.infrastructure import database
from crudframe.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("crudframe API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("crudframe API shutting down")


app = FastAPI(
    title="crudframe API", version="0.1.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(categories.router)
app.include_router(posts.router)

register_error_handlers(app)

_missing = unwrapped_routes(app)
if _missing:
    raise RuntimeError(
        f"Entry points missing with_http_error: {', '.join(_missing)}",
    )
