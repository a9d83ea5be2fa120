"""Boundary Protocols — the layer invocation contract between services and the shell.

Invariants:
    - Call order is Handler → Service → (Repository | Adapter); no layer skips ahead or behind
    - Handlers never touch repositories or adapters; services never touch requests
    - Repositories and adapters raise only StructuredError (foreign errors re-wrapped at origin)
    - Every "fetch many" takes a PageWindow — unguarded list queries cannot be expressed

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO
    - Record protocols (PostLike, CategoryLike) decouple services from ORM models
      while giving type checkers real information (unlike Any)
"""

from datetime import datetime
from typing import Protocol, Sequence
from uuid import UUID

from crudframe.core.domain_types import PostId, UserId, CategoryId
from crudframe.core.pagination import PageWindow


class PostLike(Protocol):
    """Structural contract for post records handed from repository to service."""
    id: UUID
    owner_id: str
    title: str
    body: str
    category_id: int | None
    status: str
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None


class CategoryLike(Protocol):
    id: int
    slug: str
    name: str


class PostRepository(Protocol):
    """Contract for post persistence — implemented by repositories/."""
    async def get(self, post_id: PostId) -> PostLike | None: ...
    async def list_published(
        self, window: PageWindow, category_id: CategoryId | None = None,
    ) -> tuple[Sequence[PostLike], int]: ...
    async def add(
        self,
        owner_id: UserId,
        title: str,
        body: str,
        category_id: CategoryId | None,
    ) -> PostLike: ...
    async def update(self, post: PostLike, changes: dict) -> PostLike: ...
    async def publish(
        self, post_id: PostId, actor_id: UserId, published_at: datetime,
    ) -> PostLike | None: ...
    async def delete(self, post: PostLike) -> None: ...


class CategoryRepository(Protocol):
    """Contract for category reference data — bounded, never paginated."""
    async def exists(self, category_id: CategoryId) -> bool: ...
    async def list_reference(self, cap: int) -> Sequence[CategoryLike]: ...


class PublicationNotifier(Protocol):
    """Contract for the outbound notification adapter."""
    async def notify(self, event: str, payload: dict) -> None: ...
    async def notify_many(self, events: Sequence[tuple[str, dict]]) -> None: ...
