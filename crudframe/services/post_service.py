"""Post Service — business rules and strict authorization for posts.

Invariants:
    - Drafts are visible to their owner and admins only; everyone else gets NOT_FOUND
    - Only the owner may edit or publish; owner or admin may delete
    - A post is published at most once (ALREADY_PUBLISHED), enforced here and guarded
      again by the repository's conditional update
    - Authorization runs before any mutating repository call
    - Every list goes through the pagination guard with the configured ceiling

Design Decisions:
    - Notification failure after a committed publish is logged and reported as
      notified=False rather than failing the request: the publish already happened
    - Category existence checked here, not via FK error: the client gets a field-level
      UNKNOWN_CATEGORY instead of a generic CONFLICT
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from crudframe.config import Settings
from crudframe.core.domain_types import CategoryId, PostId, PostStatus
from crudframe.core.errors import (
    FieldError, StructuredError, bad_request, conflict, forbidden, not_found,
)
from crudframe.core.pagination import (
    PaginatedResult, PaginationRequest, build_page, guard,
)
from crudframe.core.repository_protocols import (
    CategoryRepository, PostLike, PostRepository, PublicationNotifier,
)
from crudframe.core.session import Session
from crudframe.infrastructure.observability import layer_logger
from crudframe.schemas.post import PostCreate, PostUpdate

logger = layer_logger(__name__, "service")

ALREADY_PUBLISHED = "ALREADY_PUBLISHED"
UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
POST_PUBLISHED_EVENT = "post.published"


@dataclass(frozen=True)
class PublishOutcome:
    post: PostLike
    notified: bool


class PostService:

    def __init__(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        notifier: PublicationNotifier,
        settings: Settings,
    ):
        self.posts = posts
        self.categories = categories
        self.notifier = notifier
        self.settings = settings

    async def list_published(
        self,
        pagination: PaginationRequest,
        category_id: CategoryId | None = None,
    ) -> PaginatedResult[PostLike]:
        window = guard(
            pagination,
            ceiling=self.settings.pagination_max_limit,
            default_limit=self.settings.pagination_default_limit,
        )
        items, total = await self.posts.list_published(window, category_id)
        return build_page(items, window, total)

    async def get_post(self, post_id: PostId, session: Session | None) -> PostLike:
        post = await self.posts.get(post_id)
        if post is None:
            raise not_found("Post not found")
        if post.status != PostStatus.PUBLISHED.value:
            is_owner = session is not None and post.owner_id == session.user_id
            if not (is_owner or (session is not None and session.is_admin)):
                raise not_found("Post not found")
        return post

    async def create_post(self, session: Session, data: PostCreate) -> PostLike:
        if data.category_id is not None:
            await self._require_category(CategoryId(data.category_id))
        return await self.posts.add(
            owner_id=session.user_id,
            title=data.title,
            body=data.body,
            category_id=CategoryId(data.category_id) if data.category_id else None,
        )

    async def update_post(
        self, session: Session, post_id: PostId, data: PostUpdate,
    ) -> PostLike:
        post = await self._load(post_id)
        if post.owner_id != session.user_id:
            raise forbidden("You can only edit your own posts")
        changes = data.changes()
        if changes.get("category_id") is not None:
            await self._require_category(CategoryId(changes["category_id"]))
        return await self.posts.update(post, changes)

    async def publish_post(self, session: Session, post_id: PostId) -> PublishOutcome:
        post = await self._load(post_id)
        if post.owner_id != session.user_id:
            raise forbidden("You can only publish your own posts")
        if post.status == PostStatus.PUBLISHED.value:
            raise conflict("Post is already published", code=ALREADY_PUBLISHED)

        published = await self.posts.publish(
            post.id, session.user_id, datetime.now(timezone.utc),
        )
        if published is None:
            raise conflict("Post is already published", code=ALREADY_PUBLISHED)

        notified = await self._announce(published)
        return PublishOutcome(post=published, notified=notified)

    async def delete_post(self, session: Session, post_id: PostId) -> None:
        post = await self._load(post_id)
        if post.owner_id != session.user_id and not session.is_admin:
            raise forbidden("You can only delete your own posts")
        await self.posts.delete(post)
        logger.info(
            "Post deleted",
            extra={"user_id": session.user_id, "context": {"post_id": str(post_id)}},
        )

    # ─── internals ──────────────────────────────────────────────

    async def _load(self, post_id: PostId) -> PostLike:
        post = await self.posts.get(post_id)
        if post is None:
            raise not_found("Post not found")
        return post

    async def _require_category(self, category_id: CategoryId) -> None:
        if not await self.categories.exists(category_id):
            raise bad_request(
                "Unknown category",
                code=UNKNOWN_CATEGORY,
                details=[FieldError("category_id", "does not exist")],
            )

    async def _announce(self, post: PostLike) -> bool:
        try:
            await self.notifier.notify(POST_PUBLISHED_EVENT, {
                "post_id": str(post.id),
                "owner_id": post.owner_id,
                "title": post.title,
                "published_at": post.published_at.isoformat() if post.published_at else None,
            })
        except StructuredError as e:
            logger.warning(
                f"Publish notification failed: {e.code}",
                extra={"error_code": e.code, "context": {"post_id": str(post.id)}},
            )
            return False
        return True
