"""Page slicing for session listings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from dictation_master.errors import ValidationError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 25


@dataclass
class Page(Generic[T]):
    """One page of a listing.

    Attributes:
        items: Items on this page
        number: 1-based page number
        total_pages: Number of pages; at least 1 even for an empty listing
        total_items: Number of items across all pages
        page_size: Maximum items per page
    """

    items: list[T]
    number: int
    total_pages: int
    total_items: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages

    @property
    def empty_slots(self) -> int:
        """Unused places on the page, for grid-style layouts."""
        return self.page_size - len(self.items)


def total_pages(total_items: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return max(1, -(-total_items // page_size))


def paginate(items: Sequence[T], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Slice out one page of items.

    Args:
        items: Items in display order
        page: 1-based page number
        page_size: Items per page

    Returns:
        The requested page

    Raises:
        ValidationError: If ``page`` is outside ``1..total_pages``
    """
    pages = total_pages(len(items), page_size)
    if page < 1 or page > pages:
        raise ValidationError(
            f"Page {page} is out of range",
            context={"total_pages": pages},
        )
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        number=page,
        total_pages=pages,
        total_items=len(items),
        page_size=page_size,
    )
