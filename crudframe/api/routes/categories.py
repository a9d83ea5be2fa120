"""Category Routes — the bounded reference list."""

from fastapi import APIRouter, Depends

from crudframe.api.boundary import with_http_error
from crudframe.api.dependencies import get_category_service
from crudframe.api.responses import ok
from crudframe.schemas.post import CategoryOut
from crudframe.services.category_service import CategoryService

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("")
@with_http_error
async def list_categories(
    service: CategoryService = Depends(get_category_service),
):
    categories = await service.list_categories()
    return ok([CategoryOut.model_validate(c) for c in categories])
