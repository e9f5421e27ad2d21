"""
The record pipeline: filter -> subtract consumed -> sort -> paginate.

Every stage except consumption tracking is a pure function over row
sequences; derived views are recomputed from session state rather than
stored and patched.
"""

from cardsifter.filtering.consumption import ConsumptionTracker
from cardsifter.filtering.pagination import Page, clamp_page, paginate, total_pages
from cardsifter.filtering.record_filter import FilterResult, filter_records, matches
from cardsifter.filtering.sorting import apply_sort, sort_key, sort_records

__all__ = [
    # Filtering
    "FilterResult",
    "filter_records",
    "matches",
    # Consumption
    "ConsumptionTracker",
    # Sorting
    "apply_sort",
    "sort_key",
    "sort_records",
    # Pagination
    "Page",
    "clamp_page",
    "paginate",
    "total_pages",
]
