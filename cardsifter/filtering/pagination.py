"""
Pagination over the sorted visible sequence.

There is always at least one page, even for an empty sequence, and page
numbers are 1-based. Out-of-range page numbers are clamped, never raised.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from cardsifter.models.record import Record


@dataclass(frozen=True)
class Page:
    """One page of rows plus where it sits."""

    items: tuple[Record, ...]
    page_index: int
    total_pages: int
    page_size: int
    total_items: int

    @property
    def has_previous(self) -> bool:
        return self.page_index > 1

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages

    @property
    def first_item_number(self) -> int:
        """1-based position of the first row on this page (0 when empty)."""
        if not self.items:
            return 0
        return (self.page_index - 1) * self.page_size + 1


def total_pages(item_count: int, page_size: int) -> int:
    """ceil(item_count / page_size), never less than 1."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return max(1, -(-item_count // page_size))


def clamp_page(page_index: int, page_count: int) -> int:
    """Pull a page number back into [1, page_count]."""
    return min(max(page_index, 1), max(page_count, 1))


def paginate(records: Sequence[Record], page_size: int, page_index: int) -> Page:
    """
    Slice out one page.

    Args:
        records: The sorted visible sequence
        page_size: Rows per page (>= 1)
        page_index: Requested 1-based page; clamped into range

    Returns:
        The Page actually shown

    Raises:
        ValueError: If page_size < 1
    """
    pages = total_pages(len(records), page_size)
    index = clamp_page(page_index, pages)
    start = (index - 1) * page_size
    return Page(
        items=tuple(records[start : start + page_size]),
        page_index=index,
        total_pages=pages,
        page_size=page_size,
        total_items=len(records),
    )
