"""PostService — strict authorization and business rules against fake repositories.

Invariants:
    - Authorization is evaluated before any mutating repository call
    - A draft resolves only for its owner or an admin; otherwise NOT_FOUND
    - ALREADY_PUBLISHED both before the write and when the conditional write loses a race
    - Notification failure after publish → notified=False, publish still returned
    - Lists always reach the repository through the guard (ceiling from settings)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from crudframe.config import Settings
from crudframe.core.domain_types import Role
from crudframe.core.errors import StatusClass, StructuredError, internal
from crudframe.core.pagination import PaginationRequest
from crudframe.core.session import Session
from crudframe.schemas.post import PostCreate, PostUpdate
from crudframe.services.post_service import (
    ALREADY_PUBLISHED, POST_PUBLISHED_EVENT, UNKNOWN_CATEGORY, PostService,
)

OWNER = Session(user_id="owner")
STRANGER = Session(user_id="stranger")
ADMIN = Session(user_id="root", role=Role.ADMIN)


@dataclass
class FakePost:
    owner_id: str
    title: str = "t"
    body: str = ""
    category_id: int | None = None
    status: str = "draft"
    published_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)


class FakePosts:
    def __init__(self, *posts: FakePost):
        self.rows = {p.id: p for p in posts}
        self.calls: list[str] = []
        self.windows = []
        self.lose_publish_race = False

    async def get(self, post_id):
        return self.rows.get(post_id)

    async def list_published(self, window, category_id=None):
        self.windows.append(window)
        items = [p for p in self.rows.values() if p.status == "published"]
        return items[window.offset:window.offset + window.limit], len(items)

    async def add(self, owner_id, title, body, category_id):
        self.calls.append("add")
        post = FakePost(owner_id=owner_id, title=title, body=body, category_id=category_id)
        self.rows[post.id] = post
        return post

    async def update(self, post, changes):
        self.calls.append("update")
        for key, value in changes.items():
            setattr(post, key, value)
        return post

    async def publish(self, post_id, actor_id, published_at):
        self.calls.append("publish")
        if self.lose_publish_race:
            return None
        post = self.rows[post_id]
        post.status = "published"
        post.published_at = published_at
        return post

    async def delete(self, post):
        self.calls.append("delete")
        self.rows.pop(post.id)


class FakeCategories:
    def __init__(self, *ids: int):
        self.ids = set(ids)

    async def exists(self, category_id):
        return category_id in self.ids

    async def list_reference(self, cap):
        return []


class FakeNotifier:
    def __init__(self, error: StructuredError | None = None):
        self.error = error
        self.events = []

    async def notify(self, event, payload):
        if self.error:
            raise self.error
        self.events.append((event, payload))

    async def notify_many(self, events):
        for event, payload in events:
            await self.notify(event, payload)


def _service(posts, notifier=None, categories=None, **settings):
    return PostService(
        posts,
        categories or FakeCategories(1, 2),
        notifier or FakeNotifier(),
        Settings(**settings),
    )


async def _raises(coro) -> StructuredError:
    with pytest.raises(StructuredError) as exc_info:
        await coro
    return exc_info.value


# ─── list ────────────────────────────────────────────────────────

async def test_list_clamps_requested_limit_to_ceiling():
    posts = FakePosts()
    result = await _service(posts).list_published(PaginationRequest(limit=10000))
    assert posts.windows[0].limit == 100
    assert result.limit == 100


async def test_list_uses_configured_default_and_ceiling():
    posts = FakePosts()
    service = _service(posts, pagination_default_limit=5, pagination_max_limit=10)
    await service.list_published(PaginationRequest())
    await service.list_published(PaginationRequest(limit=50))
    assert [w.limit for w in posts.windows] == [5, 10]


async def test_list_reports_total_pages():
    posts = FakePosts(*[FakePost(owner_id="o", status="published") for _ in range(5)])
    result = await _service(posts).list_published(PaginationRequest(page=2, limit=2))
    assert (result.page, result.total, result.total_pages) == (2, 5, 3)
    assert len(result.items) == 2


# ─── get ─────────────────────────────────────────────────────────

async def test_get_draft_as_stranger_is_not_found():
    post = FakePost(owner_id="owner")
    error = await _raises(_service(FakePosts(post)).get_post(post.id, STRANGER))
    assert error.status_class is StatusClass.NOT_FOUND


async def test_get_draft_anonymously_is_not_found():
    post = FakePost(owner_id="owner")
    error = await _raises(_service(FakePosts(post)).get_post(post.id, None))
    assert error.code == "NOT_FOUND"


async def test_get_draft_as_admin():
    post = FakePost(owner_id="owner")
    assert await _service(FakePosts(post)).get_post(post.id, ADMIN) is post


# ─── create / update ─────────────────────────────────────────────

async def test_create_with_unknown_category_never_writes():
    posts = FakePosts()
    error = await _raises(_service(posts).create_post(
        OWNER, PostCreate(title="x", category_id=9),
    ))
    assert error.code == UNKNOWN_CATEGORY
    assert error.details[0].field == "category_id"
    assert posts.calls == []


async def test_create_assigns_session_owner():
    post = await _service(FakePosts()).create_post(OWNER, PostCreate(title="x"))
    assert post.owner_id == "owner"


async def test_update_by_stranger_never_calls_repository_update():
    post = FakePost(owner_id="owner")
    posts = FakePosts(post)
    error = await _raises(_service(posts).update_post(
        STRANGER, post.id, PostUpdate(title="mine now"),
    ))
    assert error.status_class is StatusClass.FORBIDDEN
    assert posts.calls == []
    assert post.title == "t"


async def test_update_by_admin_is_still_forbidden():
    post = FakePost(owner_id="owner")
    error = await _raises(_service(FakePosts(post)).update_post(
        ADMIN, post.id, PostUpdate(title="x"),
    ))
    assert error.http_status == 403


async def test_update_applies_only_sent_fields():
    post = FakePost(owner_id="owner", body="keep")
    updated = await _service(FakePosts(post)).update_post(
        OWNER, post.id, PostUpdate(title="new"),
    )
    assert (updated.title, updated.body) == ("new", "keep")


async def test_update_missing_post_is_not_found():
    error = await _raises(_service(FakePosts()).update_post(
        OWNER, uuid4(), PostUpdate(title="x"),
    ))
    assert error.http_status == 404


# ─── publish ─────────────────────────────────────────────────────

async def test_publish_notifies_once():
    post = FakePost(owner_id="owner")
    notifier = FakeNotifier()
    outcome = await _service(FakePosts(post), notifier).publish_post(OWNER, post.id)
    assert outcome.notified is True
    assert outcome.post.status == "published"
    assert [e for e, _ in notifier.events] == [POST_PUBLISHED_EVENT]


async def test_publish_already_published_skips_write():
    post = FakePost(
        owner_id="owner", status="published",
        published_at=datetime.now(timezone.utc),
    )
    posts = FakePosts(post)
    error = await _raises(_service(posts).publish_post(OWNER, post.id))
    assert error.code == ALREADY_PUBLISHED
    assert error.status_class is StatusClass.CONFLICT
    assert posts.calls == []


async def test_publish_lost_race_is_already_published():
    post = FakePost(owner_id="owner")
    posts = FakePosts(post)
    posts.lose_publish_race = True
    notifier = FakeNotifier()
    error = await _raises(_service(posts, notifier).publish_post(OWNER, post.id))
    assert error.code == ALREADY_PUBLISHED
    assert notifier.events == []


async def test_publish_by_stranger_never_writes():
    post = FakePost(owner_id="owner")
    posts = FakePosts(post)
    await _raises(_service(posts).publish_post(STRANGER, post.id))
    assert posts.calls == []


async def test_publish_notification_failure_reports_not_notified():
    post = FakePost(owner_id="owner")
    notifier = FakeNotifier(internal("down", code="NOTIFIER_UNAVAILABLE"))
    outcome = await _service(FakePosts(post), notifier).publish_post(OWNER, post.id)
    assert outcome.notified is False
    assert outcome.post.status == "published"


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_by_admin():
    post = FakePost(owner_id="owner")
    posts = FakePosts(post)
    await _service(posts).delete_post(ADMIN, post.id)
    assert posts.calls == ["delete"]


async def test_delete_by_stranger_never_calls_repository_delete():
    post = FakePost(owner_id="owner")
    posts = FakePosts(post)
    error = await _raises(_service(posts).delete_post(STRANGER, post.id))
    assert error.status_class is StatusClass.FORBIDDEN
    assert posts.calls == []
