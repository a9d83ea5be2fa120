"""PostRevision ORM — append-only audit row written in the same transaction as the change.

Invariants:
    - Exactly one `published` revision per published post
    - Never updated after insert

Design Decisions:
    - Written by PostRepository.publish alongside the status update: the pair is one
      atomic storage operation, not two service-level calls
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crudframe.db.base import Base


class PostRevision(Base):
    __tablename__ = "post_revisions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    actor_id: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    post: Mapped["Post"] = relationship("Post", back_populates="revisions")
