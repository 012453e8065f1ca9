"""Page/size query handling shared by every list endpoint"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from sqlalchemy.orm import Query as SAQuery

from ..config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


@dataclass
class PageParams:
    page: int = 1
    size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def page_params(
    page: int = Query(1, ge=1, description="1-indexed page number"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> PageParams:
    """Dependency injection for pagination parameters"""
    return PageParams(page=page, size=size)


def paginate(query: SAQuery, params: PageParams) -> tuple[list[Any], int]:
    """
    Return one page of ``query`` and the total match count.

    The count and the slice are two independent reads; under concurrent
    writes the count is approximate.
    """
    count = query.order_by(None).count()
    items = query.offset(params.offset).limit(params.size).all()
    return items, count


def page_response(items: list, count: int, params: PageParams) -> dict:
    return {"items": items, "count": count, "page": params.page, "size": params.size}
