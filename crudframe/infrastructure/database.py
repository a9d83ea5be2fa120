"""Database Session Manager — async connection pool with automatic rollback and error translation.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - No SQLAlchemy or driver exception type crosses this module: IntegrityError → conflict,
      everything else (incl. DataError and driver OverflowError) → internal DATABASE_ERROR
    - Driver messages are logged, never placed in the StructuredError message

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context
    - storage_errors() shared by repositories so translation happens at the point of origin
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import text

from crudframe.core.errors import StructuredError, conflict, internal

logger = logging.getLogger(__name__)

DATABASE_ERROR_CODE = "DATABASE_ERROR"

# sqlite3 raises OverflowError for out-of-range ints before SQLAlchemy can wrap it
StorageFailure = (SQLAlchemyError, OverflowError)


def translate_storage_error(exc: Exception, operation: str) -> StructuredError:
    """Map a storage failure to the error taxonomy."""
    if isinstance(exc, IntegrityError):
        logger.warning(
            f"DB integrity error during {operation}: {exc.orig}",
            extra={"operation": operation, "error_code": "CONFLICT"},
        )
        return conflict("The resource conflicts with existing data")
    logger.error(
        f"DB error during {operation}: {exc}",
        extra={"operation": operation, "error_code": DATABASE_ERROR_CODE},
    )
    return internal("Database operation failed", code=DATABASE_ERROR_CODE)


@asynccontextmanager
async def storage_errors(
    db: AsyncSession, operation: str,
) -> AsyncGenerator[None, None]:
    """Roll back and re-raise storage failures as StructuredError."""
    try:
        yield
    except StorageFailure as e:
        await db.rollback()
        raise translate_storage_error(e, operation) from e


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except StorageFailure as e:
            await session.rollback()
            raise translate_storage_error(e, "session") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise internal("Database not initialized", code=DATABASE_ERROR_CODE)
    async with db_manager.session() as session:
        yield session
