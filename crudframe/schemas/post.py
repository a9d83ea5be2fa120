"""Post Schemas — request shapes with field-level validation, response shapes.

Invariants:
    - PostCreate.title: 1-200 chars after stripping whitespace
    - PostUpdate requires at least one field
    - category_id, when given, is a positive integer within the INTEGER column range
      (existence checked by the service)

Design Decisions:
    - field_validator for side-effect-free transforms (strip) — keeps models pure
    - Unknown body keys ignored (pydantic default) rather than rejected
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from crudframe.core.domain_types import MAX_INT_ID
from crudframe.schemas.common import PaginationQuery


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    body: str = Field("", max_length=50_000)
    category_id: int | None = Field(None, ge=1, le=MAX_INT_ID)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    body: str | None = Field(None, max_length=50_000)
    category_id: int | None = Field(None, ge=1, le=MAX_INT_ID)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("title", "body")
    @classmethod
    def reject_explicit_null(cls, v):
        # Only runs for values the client sent; omitted fields keep the default
        if v is None:
            raise ValueError("must not be null")
        return v

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("at least one of title, body, category_id is required")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class PostIdParams(BaseModel):
    post_id: UUID


class PostListQuery(PaginationQuery):
    category_id: int | None = Field(None, ge=1, le=MAX_INT_ID)


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    title: str
    body: str
    category_id: int | None
    status: str
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None


class PublishedPostOut(PostOut):
    notified: bool


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
