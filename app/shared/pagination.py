"""Limit/offset paging for list endpoints."""

from __future__ import annotations

from typing import Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel

ItemT = TypeVar("ItemT")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PaginationParams(BaseModel):
    limit: int
    offset: int


def get_pagination_params(
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
) -> PaginationParams:
    """Read ``limit``/``offset`` query parameters."""
    return PaginationParams(limit=limit, offset=offset)


class Page(BaseModel, Generic[ItemT]):
    """One page of a list plus enough to request the next one."""

    items: list[ItemT]
    total: int
    limit: int
    offset: int
    next_offset: int | None


def build_page(items: list[ItemT], total: int, params: PaginationParams) -> Page[ItemT]:
    end = params.offset + len(items)
    return Page(
        items=items,
        total=total,
        limit=params.limit,
        offset=params.offset,
        next_offset=end if end < total else None,
    )
