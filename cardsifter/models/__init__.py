from cardsifter.models.criteria import FilterCriteria, split_terms
from cardsifter.models.failure import (
    FailureDetail,
    FailureKind,
    KnownError,
    LoadError,
)
from cardsifter.models.record import (
    Record,
    RecordStore,
    field_value,
    leading_int,
    parse_int,
    record_code,
)
from cardsifter.models.sort_state import UNSORTED, SortDirection, SortState

__all__ = [
    "FailureDetail",
    "FailureKind",
    "FilterCriteria",
    "KnownError",
    "LoadError",
    "Record",
    "RecordStore",
    "SortDirection",
    "SortState",
    "UNSORTED",
    "field_value",
    "leading_int",
    "parse_int",
    "record_code",
    "split_terms",
]
