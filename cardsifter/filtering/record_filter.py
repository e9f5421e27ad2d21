"""
Record Filter — Deterministic Dataset Filtering.

Turns the raw dataset plus a FilterCriteria value into the filtered
sequence the rest of the pipeline works from.

Two modes:
1. Code search: `codes` is non-empty. Rows are looked up by code, in the
   order the codes were typed, and every other criterion is ignored.
   Codes with no matching row are reported back as not found.
2. Predicate filtering: all criteria are ANDed, applied in a fixed order
   (exclusions first, so most rows are rejected by the cheapest tests).

INVARIANTS:
- Pure: same records + same criteria -> same result, nothing mutated
- Predicate filtering keeps dataset order (stable)
- Code search keeps search-key order
- Missing columns read as "" and never raise
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cardsifter.models.criteria import FilterCriteria, split_terms
from cardsifter.models.record import (
    CHARACTER,
    DYE_NAME,
    EDITION,
    FRAME,
    MORPHED,
    NUMBER,
    SERIES,
    TAG,
    TRIMMED,
    WISHLISTS,
    Record,
    RecordStore,
    field_value,
    has_value,
    is_flag_set,
    leading_int,
    parse_int,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterResult:
    """Filtered rows plus the search keys that matched nothing."""

    records: tuple[Record, ...]
    not_found: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class _CompiledCriteria:
    """Criteria with comma lists split once, not once per row."""

    criteria: FilterCriteria
    series_terms: tuple[str, ...]
    blacklist_series_terms: tuple[str, ...]
    blacklist_character_terms: tuple[str, ...]
    blacklist_tag_terms: tuple[str, ...]
    tag_text: str

    @classmethod
    def compile(cls, criteria: FilterCriteria) -> "_CompiledCriteria":
        return cls(
            criteria=criteria,
            series_terms=tuple(split_terms(criteria.series)),
            blacklist_series_terms=tuple(split_terms(criteria.blacklist_series)),
            blacklist_character_terms=tuple(split_terms(criteria.blacklist_character)),
            blacklist_tag_terms=tuple(split_terms(criteria.blacklist_tag)),
            tag_text=criteria.tag.lower(),
        )


def _contains_any(value: str, terms: tuple[str, ...]) -> bool:
    """Case-insensitive substring test against any term."""
    lowered = value.lower()
    return any(term in lowered for term in terms)


def _in_range(text: str, low: int | None, high: int | None) -> bool:
    """
    Inclusive bound test on a cell's leading integer.

    A cell without one reads as 0 against the lower bound and never
    satisfies an upper bound.
    """
    if low is not None and parse_int(text) < low:
        return False
    if high is None:
        return True
    value = leading_int(text)
    return value is not None and value <= high


# =============================================================================
# PREDICATES (applied in this order)
# =============================================================================


def _passes_exclusions(record: Record, compiled: _CompiledCriteria) -> bool:
    """excludeMorphed / excludeTrimmed / excludeFrame / excludeDyeName."""
    criteria = compiled.criteria
    if criteria.exclude_morphed and is_flag_set(record, MORPHED):
        return False
    if criteria.exclude_trimmed and is_flag_set(record, TRIMMED):
        return False
    if criteria.exclude_frame and has_value(record, FRAME):
        return False
    return not (criteria.exclude_dye_name and has_value(record, DYE_NAME))


def _passes_blacklists(record: Record, compiled: _CompiledCriteria) -> bool:
    """A row matching any blacklisted term is dropped."""
    if compiled.blacklist_series_terms and _contains_any(
        field_value(record, SERIES), compiled.blacklist_series_terms
    ):
        return False
    if compiled.blacklist_character_terms and _contains_any(
        field_value(record, CHARACTER), compiled.blacklist_character_terms
    ):
        return False
    return not (
        compiled.blacklist_tag_terms
        and _contains_any(field_value(record, TAG), compiled.blacklist_tag_terms)
    )


def _passes_series(record: Record, compiled: _CompiledCriteria) -> bool:
    if not compiled.series_terms:
        return True
    return _contains_any(field_value(record, SERIES), compiled.series_terms)


def _passes_ranges(record: Record, compiled: _CompiledCriteria) -> bool:
    """
    Inclusive number / wishlists bounds.

    A blank wishlists column fails both "at least 1" and "up to N".
    """
    criteria = compiled.criteria
    if not _in_range(field_value(record, NUMBER), criteria.number_from, criteria.number_to):
        return False
    return _in_range(
        field_value(record, WISHLISTS),
        criteria.wishlists_from,
        criteria.wishlists_to,
    )


def _passes_editions(record: Record, compiled: _CompiledCriteria) -> bool:
    editions = compiled.criteria.editions
    if not editions:
        return True
    return field_value(record, EDITION) in editions


def _passes_presence(record: Record, compiled: _CompiledCriteria) -> bool:
    """morphed / trimmed / frame / hasDyeName."""
    criteria = compiled.criteria
    if criteria.morphed and not is_flag_set(record, MORPHED):
        return False
    if criteria.trimmed and not is_flag_set(record, TRIMMED):
        return False
    if criteria.frame and not has_value(record, FRAME):
        return False
    return not (criteria.has_dye_name and not has_value(record, DYE_NAME))


def _passes_tag(record: Record, compiled: _CompiledCriteria) -> bool:
    """noneTag (tag blank) takes precedence over the tag substring."""
    tag = field_value(record, TAG)
    if compiled.criteria.none_tag:
        return not tag.strip()
    if compiled.tag_text:
        return compiled.tag_text in tag.lower()
    return True


_PREDICATES: tuple[Callable[[Record, _CompiledCriteria], bool], ...] = (
    _passes_exclusions,
    _passes_blacklists,
    _passes_series,
    _passes_ranges,
    _passes_editions,
    _passes_presence,
    _passes_tag,
)


def matches(record: Record, criteria: FilterCriteria) -> bool:
    """
    Check a single row against predicate criteria.

    Ignores `codes`; code search is a lookup, not a per-row predicate.
    """
    compiled = _CompiledCriteria.compile(criteria)
    return all(predicate(record, compiled) for predicate in _PREDICATES)


# =============================================================================
# ENTRY POINT
# =============================================================================


def _search_codes(store: RecordStore, keys: list[str]) -> FilterResult:
    """Look rows up by code, in key order."""
    found: list[Record] = []
    not_found: list[str] = []

    for key in keys:
        group = store.code_index.get(key)
        if group:
            found.extend(group)
        else:
            not_found.append(key)

    if not_found:
        logger.warning("codes_not_found", extra={"count": len(not_found), "codes": not_found})

    return FilterResult(records=tuple(found), not_found=tuple(not_found))


def filter_records(
    records: RecordStore | Sequence[Record],
    criteria: FilterCriteria,
) -> FilterResult:
    """
    Filter a dataset.

    Args:
        records: The loaded dataset (a RecordStore or any row sequence)
        criteria: Criteria to apply

    Returns:
        FilterResult with surviving rows and, for code search, the keys
        that matched no row
    """
    store = records if isinstance(records, RecordStore) else RecordStore(records=tuple(records))

    if not store.records:
        logger.warning("Dataset is empty. Filtering will return no results.")

    keys = criteria.code_keys
    if keys:
        result = _search_codes(store, keys)
    else:
        compiled = _CompiledCriteria.compile(criteria)
        result = FilterResult(
            records=tuple(
                record
                for record in store.records
                if all(predicate(record, compiled) for predicate in _PREDICATES)
            )
        )

    logger.info(
        "records_filtered",
        extra={
            "total": len(store),
            "filtered": len(result),
            "code_search": bool(keys),
            "not_found": len(result.not_found),
        },
    )

    return result
