"""Category Service — read-only access to the category reference set."""

from typing import Sequence

from crudframe.config import Settings
from crudframe.core.pagination import reference_cap
from crudframe.core.repository_protocols import CategoryLike, CategoryRepository


class CategoryService:

    def __init__(self, categories: CategoryRepository, settings: Settings):
        self.categories = categories
        self.settings = settings

    async def list_categories(self) -> Sequence[CategoryLike]:
        """Whole reference set, capped at the pagination ceiling."""
        return await self.categories.list_reference(
            reference_cap(self.settings.pagination_max_limit),
        )
