"""Service Factories — FastAPI dependencies that assemble one service per request.

Invariants:
    - Repositories and adapters are constructed here and handed to services; handlers
      only ever receive the service
    - Nothing is cached across requests except settings

Design Decisions:
    - Factories as dependencies: tests swap a whole service with app.dependency_overrides
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crudframe.config import Settings, get_settings
from crudframe.core.repository_protocols import PublicationNotifier
from crudframe.infrastructure.database import get_db
from crudframe.infrastructure.notifier import NullNotifier, WebhookNotifier
from crudframe.repositories.category_repository import CategoryRepository
from crudframe.repositories.post_repository import PostRepository
from crudframe.services.category_service import CategoryService
from crudframe.services.post_service import PostService


def get_notifier(
    settings: Settings = Depends(get_settings),
) -> PublicationNotifier:
    if not settings.notifier_webhook_url:
        return NullNotifier()
    return WebhookNotifier(
        settings.notifier_webhook_url,
        timeout_seconds=settings.notifier_timeout_seconds,
        max_retries=settings.notifier_max_retries,
        base_delay_ms=settings.notifier_base_delay_ms,
    )


def get_post_service(
    db: AsyncSession = Depends(get_db),
    notifier: PublicationNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> PostService:
    return PostService(
        PostRepository(db), CategoryRepository(db), notifier, settings,
    )


def get_category_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CategoryService:
    return CategoryService(CategoryRepository(db), settings)
