"""Category Repository — bounded reads of static reference data.

Invariants:
    - list_reference is the one sanctioned "fetch all": categories are an enumerated,
      migration-seeded set, and the read is still capped (core.pagination.reference_cap)
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crudframe.core.domain_types import CategoryId
from crudframe.infrastructure.database import storage_errors
from crudframe.models.category import Category


class CategoryRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, category_id: CategoryId) -> bool:
        async with storage_errors(self.db, "get_category"):
            return await self.db.get(Category, category_id) is not None

    async def list_reference(self, cap: int) -> Sequence[Category]:
        async with storage_errors(self.db, "list_categories"):
            result = await self.db.execute(
                select(Category).order_by(Category.id).limit(cap),
            )
            return result.scalars().all()
