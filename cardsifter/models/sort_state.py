"""
Sort state and its three-state header toggle.

Requesting a sort on a field walks a fixed cycle:

    unsorted -> ascending -> descending -> unsorted

Requesting a different field always starts that field at ascending,
whatever state the previous field was in.
"""

from dataclasses import dataclass
from enum import Enum


class SortDirection(str, Enum):
    """Direction of a sorted view."""

    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True, slots=True)
class SortState:
    """Current sort field (None = dataset order) and direction."""

    field: str | None = None
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def is_sorted(self) -> bool:
        return self.field is not None

    def toggle(self, field: str) -> "SortState":
        """Next state after a sort request on `field`."""
        if field != self.field:
            return SortState(field=field, direction=SortDirection.ASCENDING)
        if self.direction is SortDirection.ASCENDING:
            return SortState(field=field, direction=SortDirection.DESCENDING)
        return SortState()


UNSORTED = SortState()
