"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PostId wraps UUID, UserId wraps the token subject string, CategoryId wraps int
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

PostId = NewType("PostId", UUID)
UserId = NewType("UserId", str)
CategoryId = NewType("CategoryId", int)

# Upper bound of the 32-bit INTEGER columns ids are stored in
MAX_INT_ID = 2**31 - 1


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Principal roles carried in the session claims."""
    MEMBER = "member"
    ADMIN = "admin"


class PostStatus(str, Enum):
    """Post lifecycle — maps to DB `status` column. draft → published, never back."""
    DRAFT = "draft"
    PUBLISHED = "published"


class RevisionAction(str, Enum):
    """Audit actions appended atomically with the change they record."""
    PUBLISHED = "published"
