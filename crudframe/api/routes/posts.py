"""Post Routes — handlers for the posts reference resource.

Invariants:
    - Every handler is wrapped by with_http_error (outermost after the router decorator)
    - Order inside a handler: validate input → optimistic session check → one service call
      → response helper
    - Validation failures are returned verbatim from the adapter, never rebuilt
    - Handlers never import repositories, models, or adapters

Design Decisions:
    - Handlers take the raw Request and validate through api/validation.py rather than
      FastAPI body/query parameters: one failure format, every field reported
    - Missing session on a protected route raises unauthorized() here; ownership and
      role checks are left to PostService
"""

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, Request

from crudframe.api.auth import resolve_session
from crudframe.api.boundary import with_http_error
from crudframe.api.dependencies import get_post_service
from crudframe.api.responses import created, no_content, ok, paginated
from crudframe.api.validation import (
    Failure, validate_body, validate_params, validate_search_params,
)
from crudframe.core.domain_types import CategoryId, PostId
from crudframe.core.errors import unauthorized
from crudframe.schemas.post import (
    PostCreate, PostIdParams, PostListQuery, PostOut, PostUpdate, PublishedPostOut,
)
from crudframe.services.post_service import PostService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.get("")
@with_http_error
async def list_posts(
    request: Request, service: PostService = Depends(get_post_service),
):
    """List published posts, newest first, paginated."""
    query = validate_search_params(request, PostListQuery)
    if isinstance(query, Failure):
        return query.response
    category_id = query.data.category_id
    result = await service.list_published(
        query.data.to_request(),
        CategoryId(category_id) if category_id is not None else None,
    )
    return paginated(replace(
        result, items=[PostOut.model_validate(p) for p in result.items],
    ))


@router.get("/{post_id}")
@with_http_error
async def get_post(
    request: Request, service: PostService = Depends(get_post_service),
):
    """Get one post. Drafts resolve only for their owner."""
    params = validate_params(request.path_params, PostIdParams)
    if isinstance(params, Failure):
        return params.response
    session = resolve_session(request)
    post = await service.get_post(PostId(params.data.post_id), session)
    return ok(PostOut.model_validate(post))


@router.post("")
@with_http_error
async def create_post(
    request: Request, service: PostService = Depends(get_post_service),
):
    """Create a draft owned by the caller."""
    body = await validate_body(request, PostCreate)
    if isinstance(body, Failure):
        return body.response
    session = resolve_session(request)
    if session is None:
        raise unauthorized()
    post = await service.create_post(session, body.data)
    return created(PostOut.model_validate(post))


@router.patch("/{post_id}")
@with_http_error
async def update_post(
    request: Request, service: PostService = Depends(get_post_service),
):
    params = validate_params(request.path_params, PostIdParams)
    if isinstance(params, Failure):
        return params.response
    body = await validate_body(request, PostUpdate)
    if isinstance(body, Failure):
        return body.response
    session = resolve_session(request)
    if session is None:
        raise unauthorized()
    post = await service.update_post(session, PostId(params.data.post_id), body.data)
    return ok(PostOut.model_validate(post))


@router.post("/{post_id}/publish")
@with_http_error
async def publish_post(
    request: Request, service: PostService = Depends(get_post_service),
):
    """Publish a draft. Conflicts with ALREADY_PUBLISHED on a second call."""
    params = validate_params(request.path_params, PostIdParams)
    if isinstance(params, Failure):
        return params.response
    session = resolve_session(request)
    if session is None:
        raise unauthorized()
    outcome = await service.publish_post(session, PostId(params.data.post_id))
    return ok(PublishedPostOut(
        **PostOut.model_validate(outcome.post).model_dump(),
        notified=outcome.notified,
    ))


@router.delete("/{post_id}")
@with_http_error
async def delete_post(
    request: Request, service: PostService = Depends(get_post_service),
):
    params = validate_params(request.path_params, PostIdParams)
    if isinstance(params, Failure):
        return params.response
    session = resolve_session(request)
    if session is None:
        raise unauthorized()
    await service.delete_post(session, PostId(params.data.post_id))
    return no_content()
