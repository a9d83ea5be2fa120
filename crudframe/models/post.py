"""Post ORM — a user-owned draft that can be published exactly once.

Invariants:
    - id is UUID primary key (client-side default)
    - owner_id is the token subject of the creating user, immutable
    - status transitions: draft -> published (never back)
    - published_at is set iff status == published

Design Decisions:
    - owner_id stored as string: identities live in the external identity provider,
      no users table to join against
    - revisions cascade-deleted with the post
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Integer, String, Text, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crudframe.core.domain_types import PostStatus
from crudframe.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PostStatus.DRAFT.value, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    revisions: Mapped[list["PostRevision"]] = relationship(
        "PostRevision", back_populates="post",
        cascade="all, delete-orphan",
    )
