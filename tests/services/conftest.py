"""Service test fixtures — async DB + FastAPI test client + bearer tokens.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the category set seeded
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Notifications go to a recording fake, never the network

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Tokens minted with the real issue_token: the optimistic check runs unmodified
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from crudframe.api.dependencies import get_notifier
from crudframe.core.domain_types import PostStatus, Role
from crudframe.db.base import Base
from crudframe.infrastructure.database import get_db, DatabaseSessionManager
from crudframe.infrastructure.tokens import issue_token
from crudframe.models.category import Category
from crudframe.models.post import Post
import crudframe.infrastructure.database as db_module
from crudframe.main import app

OWNER_ID = "user-owner"
OTHER_ID = "user-other"
ADMIN_ID = "user-admin"

SEED_CATEGORIES = [
    (1, "general", "General"),
    (2, "engineering", "Engineering"),
    (3, "product", "Product"),
]


class RecordingNotifier:
    """Collects events instead of delivering them. Set `fail_with` to simulate outage."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []
        self.fail_with: Exception | None = None

    async def notify(self, event: str, payload: dict) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.events.append((event, payload))

    async def notify_many(self, events) -> None:
        for event, payload in events:
            await self.notify(event, payload)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        session.add_all([
            Category(id=cid, slug=slug, name=name)
            for cid, slug, name in SEED_CATEGORIES
        ])
        await session.commit()
        yield session


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def client(test_engine, test_session_factory, test_db, notifier):
    """FastAPI test client with DB and notifier dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    # Patch db_manager for the readiness probe, which uses it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


def bearer(user_id: str, role: Role = Role.MEMBER) -> dict:
    return {"Authorization": f"Bearer {issue_token(user_id, role)}"}


@pytest.fixture
def owner_headers():
    return bearer(OWNER_ID)


@pytest.fixture
def other_headers():
    return bearer(OTHER_ID)


@pytest.fixture
def admin_headers():
    return bearer(ADMIN_ID, Role.ADMIN)


@pytest.fixture
async def draft_post(test_db):
    """A draft owned by OWNER_ID."""
    post = Post(
        owner_id=OWNER_ID, title="Draft title", body="draft body",
        category_id=1, status=PostStatus.DRAFT.value,
    )
    test_db.add(post)
    await test_db.commit()
    await test_db.refresh(post)
    return post


@pytest.fixture
async def published_posts(test_db):
    """Three published posts, newest last, spread over two categories."""
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    posts = [
        Post(
            owner_id=OWNER_ID, title=f"Published {i}", body="",
            category_id=1 if i < 2 else 2,
            status=PostStatus.PUBLISHED.value,
            published_at=base + timedelta(days=i),
        )
        for i in range(3)
    ]
    test_db.add_all(posts)
    await test_db.commit()
    return posts
