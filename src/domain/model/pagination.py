# domain/model/pagination.py

"""Offset pagination and sorting shared by every UserRepository backend.

The in-memory backend runs these helpers directly; the SQL backend uses
``resolve_sort_field`` / ``resolve_sort_order`` to pick a safe ORDER BY
column and ``PaginationOptions.offset`` for LIMIT/OFFSET, so both backends
agree on which field a request actually sorts by.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Sequence, TypeVar

T = TypeVar('T')

DEFAULT_SORT_FIELD = 'created_at'

SORTABLE_FIELDS = frozenset({
    'id', 'email', 'name', 'is_active', 'created_at', 'updated_at',
})

# Wire names used by API clients
_SORT_FIELD_ALIASES = {
    'isActive': 'is_active',
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
}

MIN_LIMIT = 1
MAX_LIMIT = 100


class SortOrder(str, Enum):
    ASC = 'asc'
    DESC = 'desc'


def resolve_sort_field(sort_by: str | None) -> str:
    """Map a requested sort field onto the allow-list.

    Unknown fields silently fall back to ``created_at``.
    """
    if not sort_by:
        return DEFAULT_SORT_FIELD
    name = _SORT_FIELD_ALIASES.get(sort_by, sort_by)
    return name if name in SORTABLE_FIELDS else DEFAULT_SORT_FIELD


def resolve_sort_order(sort_order: str | SortOrder | None) -> SortOrder:
    """Anything other than ``asc`` sorts descending."""
    if sort_order is None:
        return SortOrder.DESC
    value = sort_order.value if isinstance(sort_order, SortOrder) else str(sort_order).lower()
    return SortOrder.ASC if value == SortOrder.ASC.value else SortOrder.DESC


@dataclass(frozen=True)
class PaginationOptions:
    """Requested page window and ordering."""
    page: int = 1
    limit: int = 10
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str | SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PaginationMeta:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    data: list[T] = field(default_factory=list)
    meta: PaginationMeta = field(default_factory=lambda: PaginationMeta(1, 0, 0, 0))


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def sort_key(value):
    """Text sorts by its lowercase form, matching ``lower()`` in SQL."""
    return value.lower() if isinstance(value, str) else value


def sort_records(records: Sequence[T], sort_by: str | None, sort_order: str | SortOrder | None) -> list[T]:
    """Stable sort on an allow-listed attribute; missing values go last.

    Records whose attribute is None stay after every defined value under
    both orders and keep their relative input order. Text fields compare
    case-insensitively.
    """
    attr = resolve_sort_field(sort_by)
    descending = resolve_sort_order(sort_order) is SortOrder.DESC

    defined = [r for r in records if getattr(r, attr, None) is not None]
    missing = [r for r in records if getattr(r, attr, None) is None]
    # list.sort stays stable with reverse=True
    defined.sort(key=lambda r: sort_key(getattr(r, attr)), reverse=descending)
    return defined + missing


def paginate(records: Sequence[T], options: PaginationOptions) -> PaginatedResult[T]:
    """Sort the full sequence, then slice out the requested page."""
    ordered = sort_records(records, options.sort_by, options.sort_order)
    total = len(ordered)
    start = options.offset
    return PaginatedResult(
        data=ordered[start:start + options.limit],
        meta=PaginationMeta(
            page=options.page,
            limit=options.limit,
            total=total,
            total_pages=total_pages(total, options.limit),
        ),
    )
