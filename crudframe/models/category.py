"""Category ORM — static reference data seeded by migration.

Invariants:
    - slug is unique
    - Row count stays under the pagination ceiling; reads are capped at it anyway
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from crudframe.db.base import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
