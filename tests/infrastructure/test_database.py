"""Database — tests for storage error translation and the missing-manager guard.

Tests cover:
    - IntegrityError → CONFLICT, driver message kept out of the error
    - Any other SQLAlchemyError or driver OverflowError → INTERNAL / DATABASE_ERROR
    - storage_errors rolls back before re-raising
    - Non-storage exceptions pass through untouched
"""

import pytest
from sqlalchemy.exc import DataError, IntegrityError, OperationalError

import crudframe.infrastructure.database as db_module
from crudframe.core.errors import StatusClass, StructuredError
from crudframe.infrastructure.database import (
    DATABASE_ERROR_CODE, get_db, storage_errors, translate_storage_error,
)


class _FakeSession:
    def __init__(self):
        self.rolled_back = False

    async def rollback(self):
        self.rolled_back = True


def _integrity_error() -> IntegrityError:
    return IntegrityError(
        "INSERT INTO posts ...", {}, Exception("UNIQUE constraint failed: secret_column"),
    )


def test_integrity_error_becomes_conflict():
    error = translate_storage_error(_integrity_error(), "add_post")
    assert error.status_class is StatusClass.CONFLICT
    assert "secret_column" not in error.message


def test_other_errors_become_database_error():
    error = translate_storage_error(
        OperationalError("SELECT 1", {}, Exception("connection refused")), "get_post",
    )
    assert error.status_class is StatusClass.INTERNAL
    assert error.code == DATABASE_ERROR_CODE


async def test_storage_errors_rolls_back_and_translates():
    db = _FakeSession()
    with pytest.raises(StructuredError) as exc_info:
        async with storage_errors(db, "add_post"):
            raise _integrity_error()
    assert db.rolled_back
    assert exc_info.value.http_status == 409


async def test_storage_errors_translates_driver_overflow():
    db = _FakeSession()
    with pytest.raises(StructuredError) as exc_info:
        async with storage_errors(db, "list_published_posts"):
            raise OverflowError("Python int too large to convert to SQLite INTEGER")
    assert db.rolled_back
    assert exc_info.value.code == DATABASE_ERROR_CODE
    assert "SQLite" not in exc_info.value.message


async def test_storage_errors_translates_data_error():
    db = _FakeSession()
    with pytest.raises(StructuredError) as exc_info:
        async with storage_errors(db, "add_post"):
            raise DataError("INSERT ...", {}, Exception("integer out of range"))
    assert exc_info.value.code == DATABASE_ERROR_CODE


async def test_storage_errors_passes_other_exceptions_through():
    db = _FakeSession()
    with pytest.raises(KeyError):
        async with storage_errors(db, "get_post"):
            raise KeyError("not a storage failure")
    assert not db.rolled_back


async def test_get_db_without_manager(monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    with pytest.raises(StructuredError) as exc_info:
        async for _ in get_db():
            pass
    assert exc_info.value.code == DATABASE_ERROR_CODE
