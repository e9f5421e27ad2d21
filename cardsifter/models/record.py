"""
Card records and the per-session Record Store.

A record is one row of a card export: a mapping from column name to the
raw string value. Source files are inconsistent about which columns they
carry, so every read goes through field_value(), which degrades a missing
or null cell to the empty string instead of raising.

INVARIANTS:
- The Record Store never changes after construction
- Field access never raises for missing columns
- Numeric coercion never raises; parse_int reads unparsable text as 0
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property

# A single card row: column name -> raw string value
Record = Mapping[str, str]

# Column names the pipeline reads
CODE = "code"
SERIES = "series"
CHARACTER = "character"
NUMBER = "number"
WISHLISTS = "wishlists"
EDITION = "edition"
MORPHED = "morphed"
TRIMMED = "trimmed"
FRAME = "frame"
DYE_NAME = "dye.name"
TAG = "tag"
WORKER_EFFORT = "worker.effort"

# Flag columns use this literal for true
YES = "Yes"

# Leading integer, as a lenient spreadsheet-style parse reads it
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def field_value(record: Record, name: str) -> str:
    """Get a column value, treating missing or null cells as empty."""
    value = record.get(name)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def leading_int(value: str | None) -> int | None:
    """
    Read the leading integer of the text ("12", " 7 ", "12abc" -> 12).

    Returns None for anything without one ("", "abc", None).
    """
    if not value:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def parse_int(value: str | None) -> int:
    """Coerce text to an integer, falling back to 0 (see leading_int)."""
    number = leading_int(value)
    return 0 if number is None else number


def is_flag_set(record: Record, name: str) -> bool:
    """Check a Yes/No flag column."""
    return field_value(record, name) == YES


def has_value(record: Record, name: str) -> bool:
    """Check whether an optional column is filled in."""
    return field_value(record, name) != ""


def record_code(record: Record) -> str:
    """Identifier used for consumption tracking and export."""
    return field_value(record, CODE)


@dataclass(frozen=True)
class RecordStore:
    """
    The raw dataset loaded for the current session.

    Records are held in load order. Codes are expected to be unique; when
    they are not, all rows sharing a code form one group for code search.
    """

    records: tuple[Record, ...] = field(default_factory=tuple)

    @classmethod
    def from_rows(cls, rows: Iterable[Record]) -> "RecordStore":
        """Build a store from parsed rows, copying each row."""
        return cls(records=tuple(dict(row) for row in rows))

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        """True when nothing has been loaded."""
        return not self.records

    @cached_property
    def code_index(self) -> dict[str, list[Record]]:
        """Lower-cased code -> every row carrying it, in load order."""
        index: dict[str, list[Record]] = {}
        for record in self.records:
            index.setdefault(record_code(record).lower(), []).append(record)
        return index

    def unique_editions(self) -> list[str]:
        """Distinct edition values, sorted numerically."""
        editions = {field_value(record, EDITION) for record in self.records}
        return sorted(editions, key=lambda edition: (parse_int(edition), edition))
