"""Pagination Guard — clamps client page size to a server ceiling and computes page metadata.

Invariants:
    - PageWindow.limit is always in [1, ceiling], regardless of what the client asked for
    - PageWindow.page is always >= 1; offset = (page - 1) * limit
    - PageWindow.offset never exceeds MAX_OFFSET (absurd pages land past the last row)
    - PaginatedResult.total_pages = ceil(total / limit), 0 when total is 0
    - Repository "fetch many" methods accept a PageWindow — the guard is the only way to build one

Design Decisions:
    - Excess limit is clamped, not rejected: clients asking for 10000 get the ceiling
      silently (ADR: forgiving pagination contract)
    - Unbounded reads are reserved for static reference data and still capped at
      reference_cap(ceiling)
"""

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
DEFAULT_CEILING = 100
# Largest OFFSET handed to storage; pages beyond it are clamped, not rejected
MAX_OFFSET = 2**31 - 1


@dataclass(frozen=True)
class PaginationRequest:
    """Client-supplied paging values — untrusted until guarded."""
    page: int = DEFAULT_PAGE
    limit: int | None = None


@dataclass(frozen=True)
class PageWindow:
    """Guarded paging values, safe to hand to a query."""
    page: int
    limit: int
    offset: int


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    items: Sequence[T]
    page: int
    limit: int
    total: int
    total_pages: int

    def meta(self) -> dict:
        """Wire-format pagination block."""
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


def guard(
    requested: PaginationRequest,
    ceiling: int = DEFAULT_CEILING,
    default_limit: int = DEFAULT_LIMIT,
) -> PageWindow:
    """Turn an untrusted request into a window no larger than the ceiling."""
    if ceiling < 1:
        raise ValueError("pagination ceiling must be >= 1")
    limit = requested.limit if requested.limit is not None else default_limit
    limit = max(1, min(limit, ceiling))
    page = max(DEFAULT_PAGE, min(requested.page, MAX_OFFSET // limit + 1))
    return PageWindow(page=page, limit=limit, offset=(page - 1) * limit)


def total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


def build_page(
    items: Sequence[T], window: PageWindow, total: int,
) -> PaginatedResult[T]:
    return PaginatedResult(
        items=items,
        page=window.page,
        limit=window.limit,
        total=total,
        total_pages=total_pages(total, window.limit),
    )


def reference_cap(ceiling: int = DEFAULT_CEILING) -> int:
    """Row cap for static reference reads (the only permitted fetch-all)."""
    return ceiling
