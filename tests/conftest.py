"""Root conftest — shared test configuration."""

import os

# Ensure tests never pick up real credentials or a real database
os.environ.setdefault("AUTH_SECRET", "test-secret-not-for-production-use-only")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
