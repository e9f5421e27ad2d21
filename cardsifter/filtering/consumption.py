"""
Consumption tracking for exported records.

A record is "consumed" once its code has been copied out in the current
filter session. The visible sequence is the filtered sequence with every
consumed code removed.

The set only grows between resets. It is cleared when filters are applied
or reset, when a dataset is loaded, and when batch export wraps around
after exhaustion. Page size and sort changes leave it alone.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from cardsifter.models.record import Record, record_code


@dataclass
class ConsumptionTracker:
    """Codes already exported in the current filter session."""

    _consumed: set[str] = field(default_factory=set, repr=False)

    def mark_consumed(self, records: Iterable[Record]) -> None:
        """Mark every record's code as exported."""
        self._consumed.update(record_code(record) for record in records)

    def is_consumed(self, code: str) -> bool:
        return code in self._consumed

    def reset(self) -> None:
        """Forget all consumed codes."""
        self._consumed.clear()

    def remaining(self, records: Sequence[Record]) -> list[Record]:
        """Records not yet consumed, in their given order."""
        if not self._consumed:
            return list(records)
        return [record for record in records if record_code(record) not in self._consumed]

    @property
    def consumed_codes(self) -> frozenset[str]:
        return frozenset(self._consumed)

    def __len__(self) -> int:
        return len(self._consumed)
