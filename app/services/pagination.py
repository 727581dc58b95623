"""
Pagination engine: windows a filtered query and reports the total count.
"""
from dataclasses import dataclass
from typing import Generic, List, Tuple, TypeVar
import math

from fastapi import Response
from sqlalchemy.orm import Query

from app.config import settings
from app.schemas.pagination import PaginationParams

T = TypeVar("T")

TOTAL_COUNT_HEADER = "X-Total-Count"
TOTAL_PAGES_HEADER = "X-Total-Pages"


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0


def normalize_pagination(
    page: int,
    page_size: int,
    default_size: int = settings.DEFAULT_PAGE_SIZE,
    max_size: int = settings.MAX_PAGE_SIZE,
) -> Tuple[int, int]:
    """Out-of-range input falls back to defaults instead of raising"""
    if page is None or page < 1:
        page = 1
    if page_size is None or page_size <= 0:
        page_size = default_size
    page_size = min(page_size, max_size)
    return page, page_size


def paginate(query: Query, params: PaginationParams) -> Page:
    """
    Count the filtered query, then apply the [offset, offset + size) window.

    The count runs on the same query (ORDER BY stripped) so filters are
    never duplicated.
    """
    page, page_size = normalize_pagination(params.page, params.page_size)
    total = query.order_by(None).count()
    if total == 0:
        return Page(items=[], total=0, page=page, page_size=page_size)

    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return Page(items=items, total=total, page=page, page_size=page_size)


def set_pagination_headers(response: Response, page: Page) -> None:
    """Expose totals through response headers, outside the body"""
    response.headers[TOTAL_COUNT_HEADER] = str(page.total)
    response.headers[TOTAL_PAGES_HEADER] = str(page.total_pages)
