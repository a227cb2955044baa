"""
Page/limit pagination helpers shared by list endpoints.
"""
import math

from pydantic import BaseModel


class Pagination(BaseModel):
    """Pagination block returned alongside list results."""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


def offset_for(page: int, limit: int) -> int:
    """Row offset for a 1-based page number."""
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Build the pagination block for a page of `total` rows."""
    total_pages = math.ceil(total / limit) if limit else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
