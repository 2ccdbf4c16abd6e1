"""Page/limit windowing for collection endpoints."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from fastapi import Query
from sqlalchemy import Select

from library_api.core.config import get_settings
from library_api.core.database import MAX_INTEGER

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """A 1-based page number and a page size."""

    page: int = 1
    limit: int = 3

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def is_beyond_store(self) -> bool:
        """True when the window starts past any row a store can address."""
        return self.offset > MAX_INTEGER


def coerce_positive_int(raw: str | None, default: int) -> int:
    """Parse a query value, falling back to ``default`` when absent, non-numeric or < 1."""
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def get_page_request(
    page: str | None = Query(None, description="1-based page number"),
    limit: str | None = Query(None, description="Items per page"),
) -> PageRequest:
    """Dependency that reads ``page`` and ``limit`` from the query string."""
    settings = get_settings()
    return PageRequest(
        page=coerce_positive_int(page, settings.default_page),
        limit=coerce_positive_int(limit, settings.default_limit),
    )


def paginate(items: Sequence[T], page: int, limit: int) -> list[T]:
    """Return the items at positions ``[(page - 1) * limit, page * limit)``.

    In-memory twin of :func:`paginate_query`; the tests hold the two to the
    same window.
    """
    start = (page - 1) * limit
    return list(items[start : start + limit])


def paginate_query(stmt: Select, model, page_request: PageRequest) -> Select:
    """Window a select by primary key order so identical queries return identical pages.

    The limit is capped at the largest bindable integer. Callers must check
    :attr:`PageRequest.is_beyond_store` first, since such an offset cannot be bound.
    """
    return (
        stmt.order_by(model.id)
        .offset(page_request.offset)
        .limit(min(page_request.limit, MAX_INTEGER))
    )
