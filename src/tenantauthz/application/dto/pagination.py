"""Pagination DTOs."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100


@dataclass
class Page(Generic[T]):
    """One forward-only page; next_cursor is None on the last page."""

    items: list[T]
    limit: int
    next_cursor: str | None


def clamp_limit(
    limit: int | None,
    default: int = DEFAULT_PAGE_LIMIT,
    maximum: int = MAX_PAGE_LIMIT,
) -> int:
    """Clamp a requested page size into [1, maximum]."""
    if limit is None:
        limit = default
    return min(max(limit, 1), maximum)
