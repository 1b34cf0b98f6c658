"""
Pagination helpers shared by the listing endpoints.

Admin listings fetch every matching row and slice in memory, so besides the
offset arithmetic this module provides ``paginate`` for plain lists.
"""

from pydantic import BaseModel
from typing import List, Sequence, TypeVar
import math

T = TypeVar("T")


def calculate_offset(page: int, limit: int) -> int:
    """
    Calculate the offset from a 1-indexed page number and a page size.

    Example:
        >>> calculate_offset(1, 10)
        0
        >>> calculate_offset(3, 10)
        20
    """
    if page < 1:
        raise ValueError("Page must be >= 1")
    if limit < 1:
        raise ValueError("Limit must be >= 1")

    return (page - 1) * limit


def calculate_total_pages(total: int, limit: int) -> int:
    """
    Calculate the number of pages for ``total`` items.

    Example:
        >>> calculate_total_pages(95, 10)
        10
        >>> calculate_total_pages(0, 10)
        0
    """
    if total < 0:
        raise ValueError("Total must be >= 0")
    if limit < 1:
        raise ValueError("Limit must be >= 1")

    if total == 0:
        return 0

    return math.ceil(total / limit)


class PaginationMeta(BaseModel):
    """Metadata returned next to a page of items."""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = calculate_total_pages(total, limit)
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


def paginate(items: Sequence[T], page: int, limit: int) -> List[T]:
    """
    Return one page of an in-memory sequence.

    Pages past the end come back empty.
    """
    offset = calculate_offset(page, limit)
    return list(items[offset:offset + limit])
