"""Common Schemas — pagination query shape and the wire envelopes.

Invariants:
    - PaginationQuery accepts any integer page/limit: out-of-range values are clamped by
      the guard, not rejected (only non-integers fail validation)
    - ErrorEnvelope mirrors StructuredError.to_response(); PaginationMeta mirrors
      PaginatedResult.meta()

Design Decisions:
    - Envelope models exist for clients and OpenAPI docs; the server builds envelopes
      from core types so there is one serializer per direction
"""

from pydantic import BaseModel, ConfigDict, Field

from crudframe.core.pagination import DEFAULT_PAGE, PaginationRequest


class PaginationQuery(BaseModel):
    """Query-string paging: ?page=&limit= (both optional)."""
    page: int = DEFAULT_PAGE
    limit: int | None = None

    def to_request(self) -> PaginationRequest:
        return PaginationRequest(page=self.page, limit=self.limit)


class FieldErrorOut(BaseModel):
    field: str
    message: str


class ErrorBody(BaseModel):
    code: str
    message: str
    details: list[FieldErrorOut] | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody


class PaginationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
