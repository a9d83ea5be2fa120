"""ORM Models — SQLAlchemy declarative models for the reference feature.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from crudframe.models.category import Category  # noqa: F401
from crudframe.models.post import Post  # noqa: F401
from crudframe.models.post_revision import PostRevision  # noqa: F401
