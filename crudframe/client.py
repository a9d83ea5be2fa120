"""API Client — typed httpx client for services speaking the crudframe envelopes.

Invariants:
    - 2xx responses return the `data` member (or None for 204)
    - Non-2xx responses raise ApiError carrying status, code, message, and details
      parsed from the error envelope
    - Bodies that are not an error envelope still raise ApiError (code UNKNOWN_ERROR)

Design Decisions:
    - Async httpx client with injectable transport: tests drive the real ASGI app
    - ApiError predicates mirror the status classes so callers branch on intent
"""

from typing import Any

import httpx
from pydantic import ValidationError

from crudframe.schemas.common import ErrorEnvelope, FieldErrorOut, PaginationMeta

UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ApiError(Exception):
    """Error returned by a crudframe API, as seen by a client."""

    def __init__(
        self,
        message: str,
        status: int,
        code: str = UNKNOWN_ERROR,
        details: list[FieldErrorOut] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details or []

    def is_validation_error(self) -> bool:
        return self.code == "VALIDATION_ERROR"

    def is_unauthorized(self) -> bool:
        return self.status == 401

    def is_forbidden(self) -> bool:
        return self.status == 403

    def is_not_found(self) -> bool:
        return self.status == 404

    def is_conflict(self) -> bool:
        return self.status == 409


class ApiClient:

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url, headers=headers,
            transport=transport, timeout=timeout,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict | None = None,
    ) -> Any:
        payload = await self._send(method, path, json, params)
        return None if payload is None else payload.get("data")

    async def request_page(
        self, path: str, params: dict | None = None,
    ) -> tuple[list, PaginationMeta]:
        """GET a paginated list: (items, pagination)."""
        payload = await self._send("GET", path, None, params) or {}
        return payload.get("data", []), PaginationMeta.model_validate(
            payload.get("pagination", {}),
        )

    async def _send(
        self, method: str, path: str, json: Any, params: dict | None,
    ) -> dict | None:
        response = await self._client.request(
            method, path, json=json, params=params,
        )
        if response.status_code == 204:
            return None
        if response.is_success:
            return response.json()
        raise _to_api_error(response)


def _to_api_error(response: httpx.Response) -> ApiError:
    try:
        envelope = ErrorEnvelope.model_validate(response.json())
    except (ValueError, ValidationError):
        return ApiError("An error occurred", response.status_code)
    return ApiError(
        envelope.error.message,
        response.status_code,
        envelope.error.code,
        envelope.error.details,
    )
