"""ApiClient — typed client against the real ASGI app.

Invariants:
    - Success returns the `data` member; 204 returns None
    - Error envelopes surface as ApiError with status, code, message, details
    - Non-envelope error bodies still raise ApiError (UNKNOWN_ERROR)
"""

import httpx
import pytest
from httpx import ASGITransport

from crudframe.client import UNKNOWN_ERROR, ApiClient, ApiError
from crudframe.main import app


def _client(headers: dict | None = None) -> ApiClient:
    token = None
    if headers:
        token = headers["Authorization"].removeprefix("Bearer ")
    return ApiClient(
        "http://test", token=token, transport=ASGITransport(app=app),
    )


async def test_create_returns_data(client, owner_headers):
    async with _client(owner_headers) as api:
        data = await api.request("POST", "/api/v1/posts", json={"title": "Hi"})
    assert data["title"] == "Hi"
    assert data["status"] == "draft"


async def test_unauthorized_raises_api_error(client):
    async with _client() as api:
        with pytest.raises(ApiError) as exc_info:
            await api.request("POST", "/api/v1/posts", json={"title": "Hi"})
    assert exc_info.value.is_unauthorized()
    assert exc_info.value.code == "UNAUTHORIZED"


async def test_validation_details_parsed(client, owner_headers):
    async with _client(owner_headers) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.request("POST", "/api/v1/posts", json={})
    error = exc_info.value
    assert error.status == 400
    assert error.is_validation_error()
    assert [(d.field, d.message) for d in error.details] == [("title", "required")]


async def test_delete_returns_none(client, draft_post, owner_headers):
    async with _client(owner_headers) as api:
        assert await api.request("DELETE", f"/api/v1/posts/{draft_post.id}") is None
        with pytest.raises(ApiError) as exc_info:
            await api.request("GET", f"/api/v1/posts/{draft_post.id}")
    assert exc_info.value.is_not_found()


async def test_request_page_returns_meta(client, published_posts):
    async with _client() as api:
        items, meta = await api.request_page("/api/v1/posts", params={"limit": 2})
    assert len(items) == 2
    assert (meta.page, meta.limit, meta.total, meta.total_pages) == (1, 2, 3, 2)


async def test_non_envelope_error_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
    async with ApiClient("http://test", transport=transport) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.request("GET", "/anything")
    assert exc_info.value.status == 502
    assert exc_info.value.code == UNKNOWN_ERROR
