"""
Record sorting for the results view.

Numeric columns (number, wishlists, edition, worker.effort) compare as
integers with unparsable cells as 0. Every other column compares as text,
case-insensitively first and by exact text to break ties, so the order
never depends on the machine's locale.

Sorting is stable in both directions: rows with equal keys keep their
incoming relative order, including when descending.
"""

from collections.abc import Callable, Sequence
from typing import Any

from cardsifter.config import NUMERIC_SORT_FIELDS
from cardsifter.models.record import Record, field_value, parse_int
from cardsifter.models.sort_state import SortDirection, SortState


def sort_key(field: str) -> Callable[[Record], Any]:
    """Key function for sorting rows on `field`."""
    if field in NUMERIC_SORT_FIELDS:
        return lambda record: parse_int(field_value(record, field))

    def _text_key(record: Record) -> tuple[str, str]:
        value = field_value(record, field)
        return (value.casefold(), value)

    return _text_key


def sort_records(
    records: Sequence[Record],
    field: str | None,
    direction: SortDirection = SortDirection.ASCENDING,
) -> list[Record]:
    """
    Sort rows on a column.

    Args:
        records: Rows to sort (not modified)
        field: Column to sort on; None keeps the incoming order
        direction: Ascending or descending

    Returns:
        A new list of the same rows
    """
    if field is None:
        return list(records)

    # sorted() keeps equal keys in input order even with reverse=True
    return sorted(
        records,
        key=sort_key(field),
        reverse=direction is SortDirection.DESCENDING,
    )


def apply_sort(records: Sequence[Record], state: SortState) -> list[Record]:
    """Sort rows according to a SortState."""
    return sort_records(records, state.field, state.direction)
