"""Initial schema — categories (seeded reference data), posts, post_revisions.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Reference set — keep well under the pagination ceiling (100)
CATEGORIES = [
    (1, "general", "General"),
    (2, "engineering", "Engineering"),
    (3, "product", "Product"),
    (4, "announcements", "Announcements"),
]


def upgrade() -> None:
    categories = op.create_table(
        "categories",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("slug", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text, nullable=False, server_default=""),
        sa.Column("category_id", sa.Integer, sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_posts_owner_id", "posts", ["owner_id"])
    op.create_index("ix_posts_status", "posts", ["status"])

    op.create_table(
        "post_revisions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "post_id", sa.Uuid,
            sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("actor_id", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_post_revisions_post_id", "post_revisions", ["post_id"])

    op.bulk_insert(categories, [
        {"id": cid, "slug": slug, "name": name} for cid, slug, name in CATEGORIES
    ])


def downgrade() -> None:
    op.drop_index("ix_post_revisions_post_id", table_name="post_revisions")
    op.drop_table("post_revisions")
    op.drop_index("ix_posts_status", table_name="posts")
    op.drop_index("ix_posts_owner_id", table_name="posts")
    op.drop_table("posts")
    op.drop_table("categories")
