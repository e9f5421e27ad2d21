"""
Batch Export — Incremental "Copy N" With Exhaustion And Restore.

Each export request copies the next batch of not-yet-exported records and
marks them consumed. Once every record has been exported, the next request
restores the full set instead of returning empty batches forever.

STATES:
- ACTIVE(cursor): `cursor` records of the current pass are consumed
- EXHAUSTED: nothing is left; the next request restores

TRANSITIONS:
- request in ACTIVE, records remain -> export min(batch, remaining);
  EXHAUSTED if that took the last ones, else ACTIVE(cursor + n)
- request in ACTIVE with nothing remaining, or in EXHAUSTED
  -> clear consumption, ACTIVE(0), nothing exported
- reset() from any state -> ACTIVE(0)

INVARIANTS:
- Every record is exported exactly once per pass, in the given order
- Rows sharing a code are one export unit: the code appears once
- Read remaining / take batch / mark consumed happens in one call
- A restore never emits a payload
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from cardsifter.config import BULK_BATCH_SIZE, SINGLE_BATCH_SIZE
from cardsifter.filtering.consumption import ConsumptionTracker
from cardsifter.models.record import Record, record_code
from cardsifter.services.export_formatter import format_codes

logger = logging.getLogger(__name__)


class ExportMode(str, Enum):
    """Copy actions sharing the batch machine."""

    BULK = "bulk"
    SINGLE = "single"

    @property
    def batch_size(self) -> int:
        return BULK_BATCH_SIZE if self is ExportMode.BULK else SINGLE_BATCH_SIZE


class ExportPhase(str, Enum):
    """Where the batch machine is in its pass."""

    ACTIVE = "active"
    EXHAUSTED = "exhausted"


def _one_per_code(records: Sequence[Record], limit: int) -> tuple[Record, ...]:
    """First `limit` rows with distinct codes; rows sharing a code export once."""
    seen: set[str] = set()
    picked: list[Record] = []
    for record in records:
        code = record_code(record)
        if code in seen:
            continue
        seen.add(code)
        picked.append(record)
        if len(picked) == limit:
            break
    return tuple(picked)


@dataclass(frozen=True)
class ExportResult:
    """Outcome of one export request."""

    mode: ExportMode
    records: tuple[Record, ...] = ()
    payload: str | None = None
    start: int = 0
    end: int = 0
    total: int = 0
    restored: bool = False

    @property
    def summary(self) -> str:
        """User-facing confirmation line."""
        if self.restored:
            return f"Restored {self.total} codes. Starting over."
        return f"Copied codes {self.start}-{self.end} of {self.total}"


@dataclass
class BatchExporter:
    """
    State machine for repeated copy actions over one filtered set.

    The ConsumptionTracker is shared with the session, which derives the
    visible rows from it.
    """

    tracker: ConsumptionTracker
    phase: ExportPhase = ExportPhase.ACTIVE
    cursor: int = 0

    def request_batch(
        self,
        records: Sequence[Record],
        mode: ExportMode = ExportMode.BULK,
        prefix: str = "",
    ) -> ExportResult:
        """
        Export the next batch.

        Args:
            records: The full set being exported, in export order
                (consumed records included; they are skipped here)
            mode: BULK (50 per request) or SINGLE (1 per request)
            prefix: Optional per-line prefix for the payload

        Returns:
            ExportResult; `restored=True` with no payload when the set
            had been exhausted
        """
        total = len(records)
        remaining = self.tracker.remaining(records)

        if self.phase is ExportPhase.EXHAUSTED or not remaining:
            return self._restore(mode, total)

        batch = _one_per_code(remaining, mode.batch_size)
        already_exported = total - len(remaining)
        payload = format_codes(batch, group_size=mode.batch_size, prefix=prefix)

        self.tracker.mark_consumed(batch)
        left = self.tracker.remaining(remaining)
        self.cursor = total - len(left)
        if not left:
            self.phase = ExportPhase.EXHAUSTED

        result = ExportResult(
            mode=mode,
            records=batch,
            payload=payload,
            start=already_exported + 1,
            end=self.cursor,
            total=total,
        )

        logger.info(
            "batch_exported",
            extra={
                "mode": mode.value,
                "batch": len(batch),
                "cursor": self.cursor,
                "total": total,
                "exhausted": self.phase is ExportPhase.EXHAUSTED,
            },
        )

        return result

    def reset(self) -> None:
        """Start a new pass: nothing consumed."""
        self.tracker.reset()
        self.phase = ExportPhase.ACTIVE
        self.cursor = 0

    @property
    def is_exhausted(self) -> bool:
        return self.phase is ExportPhase.EXHAUSTED

    def label(self, total: int) -> str:
        """Text for the copy button given the filtered count."""
        if total == 0:
            return f"Copy Codes (max {BULK_BATCH_SIZE})"
        if self.is_exhausted:
            return "Restore & Start Over"
        return f"Copy Codes ({self.cursor}/{total})"

    def _restore(self, mode: ExportMode, total: int) -> ExportResult:
        self.reset()
        logger.info("consumption_restored", extra={"mode": mode.value, "total": total})
        return ExportResult(mode=mode, total=total, restored=True)
