"""Post Repository — SQLAlchemy persistence for posts and their audit revisions.

Invariants:
    - list_published only accepts a PageWindow — limit/offset never come from the client directly
    - publish() is one atomic storage operation: conditional status update + revision insert,
      committed together or not at all
    - publish() returns None when no draft matched (lost race or already published);
      deciding what that means is the service's job

Design Decisions:
    - Conditional UPDATE ... WHERE status = 'draft' instead of a row lock: two concurrent
      publishes cannot both append a revision
    - count via subquery of the same filtered select: total and page can't disagree on filters
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from crudframe.core.domain_types import (
    CategoryId, PostId, PostStatus, RevisionAction, UserId,
)
from crudframe.core.pagination import PageWindow
from crudframe.infrastructure.database import storage_errors
from crudframe.infrastructure.observability import layer_logger
from crudframe.models.post import Post
from crudframe.models.post_revision import PostRevision

logger = layer_logger(__name__, "repository", table="posts")


class PostRepository:
    """Post persistence — implements core.repository_protocols.PostRepository."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, post_id: PostId) -> Post | None:
        async with storage_errors(self.db, "get_post"):
            return await self.db.get(Post, post_id)

    async def list_published(
        self, window: PageWindow, category_id: CategoryId | None = None,
    ) -> tuple[Sequence[Post], int]:
        query = select(Post).where(Post.status == PostStatus.PUBLISHED.value)
        if category_id is not None:
            query = query.where(Post.category_id == category_id)

        async with storage_errors(self.db, "list_published_posts"):
            total = await self.db.scalar(
                select(func.count()).select_from(query.subquery()),
            )
            result = await self.db.execute(
                query.order_by(Post.published_at.desc(), Post.id)
                .limit(window.limit)
                .offset(window.offset),
            )
            return result.scalars().all(), total or 0

    async def add(
        self,
        owner_id: UserId,
        title: str,
        body: str,
        category_id: CategoryId | None,
    ) -> Post:
        post = Post(
            owner_id=owner_id, title=title, body=body,
            category_id=category_id, status=PostStatus.DRAFT.value,
        )
        async with storage_errors(self.db, "add_post"):
            self.db.add(post)
            await self.db.commit()
            await self.db.refresh(post)
        logger.info("Post created", extra={"context": {"post_id": str(post.id)}})
        return post

    async def update(self, post: Post, changes: dict) -> Post:
        async with storage_errors(self.db, "update_post"):
            for key, value in changes.items():
                setattr(post, key, value)
            await self.db.commit()
            await self.db.refresh(post)
        return post

    async def publish(
        self, post_id: PostId, actor_id: UserId, published_at: datetime,
    ) -> Post | None:
        async with storage_errors(self.db, "publish_post"):
            result = await self.db.execute(
                update(Post)
                .where(
                    Post.id == post_id,
                    Post.status == PostStatus.DRAFT.value,
                )
                .values(
                    status=PostStatus.PUBLISHED.value,
                    published_at=published_at,
                    updated_at=published_at,
                )
                .execution_options(synchronize_session=False),
            )
            if result.rowcount == 0:
                await self.db.rollback()
                return None
            self.db.add(PostRevision(
                post_id=post_id,
                action=RevisionAction.PUBLISHED.value,
                actor_id=actor_id,
            ))
            await self.db.commit()
            post = await self.db.get(Post, post_id, populate_existing=True)
        logger.info(
            "Post published",
            extra={"user_id": actor_id, "context": {"post_id": str(post_id)}},
        )
        return post

    async def delete(self, post: Post) -> None:
        async with storage_errors(self.db, "delete_post"):
            await self.db.delete(post)
            await self.db.commit()
