"""
Pagination and sort helpers shared by the list endpoints.
"""

from dataclasses import dataclass
from typing import Collection, Generic, List, Optional, Tuple, TypeVar

from app.repositories.base import SortSpec
from app.schemas.schemas import PageMeta

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps (page - 1) * limit within a signed 64-bit offset
MAX_PAGE = (2 ** 63 - 1) // MAX_LIMIT


@dataclass
class Page(Generic[T]):
    items: List[T]
    meta: PageMeta


def normalize_paging(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    """Clamp page to [1, MAX_PAGE]; limit outside [1, 100] falls back to 10."""
    if page is None or page < 1:
        page = DEFAULT_PAGE
    elif page > MAX_PAGE:
        page = MAX_PAGE
    if limit is None or limit < 1 or limit > MAX_LIMIT:
        limit = DEFAULT_LIMIT
    return page, limit


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


def page_count(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return (total + limit - 1) // limit


def resolve_sort(sort_by: Optional[str], order: Optional[str], allowed: Collection[str],
                 default_field: str = "created_at") -> SortSpec:
    """
    Map user supplied sort parameters onto an allow-listed field.

    Unknown fields fall back to ``default_field``; anything but "asc"
    sorts descending.
    """
    field = sort_by if sort_by in allowed else default_field
    descending = (order or "").lower() != "asc"
    return SortSpec(field=field, descending=descending)


def build_meta(page: int, limit: int, total: int, sort: Optional[SortSpec] = None, search: str = "") -> PageMeta:
    return PageMeta(
        page=page,
        limit=limit,
        total=total,
        pages=page_count(total, limit),
        sort_by=sort.field if sort else None,
        order=("desc" if sort.descending else "asc") if sort else None,
        search=search,
    )
