"""
Browser session: the single source of truth for one browsing session.

Holds the canonical state (dataset, applied criteria, consumption, sort,
pagination, export prefix) and derives every view from it on demand:

    RecordStore -> filter -> subtract consumed -> sort -> paginate

Only the filter result is cached, and the cache is dropped whenever the
dataset or criteria change. Nothing downstream is stored, so the visible,
sorted and paged views can never drift apart.

ORDERING DISCIPLINE:
Any change to the universe of visible records (loading a dataset,
applying or resetting filters) resets the consumption set, the batch
machine and the current page in the same call. Changes that only shrink
the visible set (exports) re-clamp the current page.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from cardsifter.config import EXPORT_GROUP_SIZE, settings
from cardsifter.filtering.consumption import ConsumptionTracker
from cardsifter.filtering.pagination import Page, clamp_page, paginate
from cardsifter.filtering.pagination import total_pages as count_pages
from cardsifter.filtering.record_filter import FilterResult, filter_records
from cardsifter.filtering.sorting import apply_sort
from cardsifter.models.criteria import FilterCriteria
from cardsifter.models.failure import FailureKind, KnownError
from cardsifter.models.record import Record, RecordStore
from cardsifter.models.sort_state import UNSORTED, SortState
from cardsifter.services.batch_export import BatchExporter, ExportMode, ExportResult
from cardsifter.services.export_formatter import format_download
from cardsifter.services.export_sink import ExportSink

logger = logging.getLogger(__name__)

# Filename hint passed to the sink for copy actions
CLIPBOARD_HINT = "clipboard.txt"


@dataclass(frozen=True)
class SessionView:
    """Everything a results screen shows, derived in one pass."""

    page: Page
    total_count: int
    filtered_count: int
    visible_count: int
    not_found: tuple[str, ...]
    sort: SortState
    copy_label: str

    @property
    def counts_label(self) -> str:
        """Visible and filtered counts for the results header."""
        return f"{self.visible_count}/{self.filtered_count}"


@dataclass
class BrowserSession:
    """
    Mutable session state with a single writer (the user's actions).

    Usage:
        session = BrowserSession()
        session.load_dataset(rows)
        session.apply_filters(FilterCriteria(series="naruto"))
        view = session.view()
        result = session.copy_batch()
    """

    store: RecordStore = field(default_factory=RecordStore)
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    sort: SortState = UNSORTED
    page_size: int = field(default_factory=lambda: settings.default_page_size)
    page: int = 1
    prefix: str = ""
    sink: ExportSink | None = None
    tracker: ConsumptionTracker = field(default_factory=ConsumptionTracker)
    exporter: BatchExporter = field(init=False)
    _filter_cache: FilterResult | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {self.page_size}")
        self.exporter = BatchExporter(tracker=self.tracker)

    # =========================================================================
    # DATASET AND FILTERS
    # =========================================================================

    def load_dataset(self, records: Iterable[Record]) -> None:
        """
        Replace the dataset with a freshly loaded one.

        Called only after a load fully succeeded. Applied criteria,
        consumption and page reset; the sort order is kept.
        """
        self.store = RecordStore.from_rows(records)
        self.criteria = FilterCriteria()
        self._reset_derived_state()
        logger.info("dataset_loaded", extra={"records": len(self.store)})

    def apply_filters(self, criteria: FilterCriteria) -> FilterResult:
        """Apply new criteria and start a fresh filter session."""
        self.criteria = criteria
        self._reset_derived_state()
        return self.filter_result

    def reset_filters(self) -> None:
        """Clear all criteria and the sort order."""
        self.criteria = FilterCriteria()
        self.sort = UNSORTED
        self._reset_derived_state()

    def _reset_derived_state(self) -> None:
        self._filter_cache = None
        self.exporter.reset()
        self.page = 1

    @property
    def filter_result(self) -> FilterResult:
        if self._filter_cache is None:
            self._filter_cache = filter_records(self.store, self.criteria)
        return self._filter_cache

    @property
    def filtered(self) -> tuple[Record, ...]:
        """Rows passing the applied criteria, consumed ones included."""
        return self.filter_result.records

    @property
    def not_found(self) -> tuple[str, ...]:
        """Code-search keys that matched nothing."""
        return self.filter_result.not_found

    def visible(self) -> list[Record]:
        """Filtered rows not yet exported, in filtered order."""
        return self.tracker.remaining(self.filtered)

    def sorted_visible(self) -> list[Record]:
        return apply_sort(self.visible(), self.sort)

    def unique_editions(self) -> list[str]:
        return self.store.unique_editions()

    # =========================================================================
    # SORTING AND PAGINATION
    # =========================================================================

    def toggle_sort(self, field_name: str) -> SortState:
        """Advance the header toggle for a column."""
        self.sort = self.sort.toggle(field_name)
        self._clamp_page()
        return self.sort

    def set_page_size(self, page_size: int) -> None:
        """
        Change rows per page and go back to page 1.

        Raises:
            KnownError: If page_size is not a positive number
        """
        if page_size < 1:
            raise KnownError(
                kind=FailureKind.INVALID_INPUT,
                message=f"Page size must be at least 1, got {page_size}.",
                suggestion=f"Pick one of {', '.join(map(str, settings.page_size_choices))}.",
            )
        self.page_size = page_size
        self.page = 1

    @property
    def total_pages(self) -> int:
        return count_pages(len(self.visible()), self.page_size)

    def go_to_page(self, page: int) -> int:
        """Jump to a page, clamped into range. Returns the page shown."""
        self.page = clamp_page(page, self.total_pages)
        return self.page

    def first_page(self) -> int:
        return self.go_to_page(1)

    def previous_page(self) -> int:
        return self.go_to_page(self.page - 1)

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def last_page(self) -> int:
        return self.go_to_page(self.total_pages)

    def _clamp_page(self) -> None:
        self.page = clamp_page(self.page, self.total_pages)

    def view(self) -> SessionView:
        """Derive the current results screen."""
        visible = self.visible()
        current = paginate(apply_sort(visible, self.sort), self.page_size, self.page)
        self.page = current.page_index
        return SessionView(
            page=current,
            total_count=len(self.store),
            filtered_count=len(self.filtered),
            visible_count=len(visible),
            not_found=self.not_found,
            sort=self.sort,
            copy_label=self.copy_label,
        )

    # =========================================================================
    # EXPORT
    # =========================================================================

    @property
    def copy_label(self) -> str:
        return self.exporter.label(len(self.filtered))

    def copy_batch(self, prefix: str | None = None) -> ExportResult:
        """
        Copy 50: next batch of the filtered rows, in filtered order.

        Sort order does not affect which rows a bulk copy takes.
        """
        return self._export(list(self.filtered), ExportMode.BULK, prefix)

    def copy_one(self, prefix: str | None = None) -> ExportResult:
        """Copy 1: the first remaining row in the current sort order."""
        return self._export(apply_sort(self.filtered, self.sort), ExportMode.SINGLE, prefix)

    def _export(
        self,
        records: list[Record],
        mode: ExportMode,
        prefix: str | None,
    ) -> ExportResult:
        result = self.exporter.request_batch(
            records,
            mode=mode,
            prefix=self.prefix if prefix is None else prefix,
        )
        if result.payload is not None:
            self._emit(result.payload, CLIPBOARD_HINT)
        self._clamp_page()
        return result

    def download(self, prefix: str | None = None, one_per_line: bool = False) -> str:
        """
        Build the text-file export of every filtered row.

        Downloads ignore consumption: the file always holds the full
        filtered set.
        """
        payload = format_download(
            self.filtered,
            group_size=1 if one_per_line else EXPORT_GROUP_SIZE,
            prefix=self.prefix if prefix is None else prefix,
        )
        self._emit(payload, settings.export_filename)
        return payload

    def _emit(self, payload: str, filename_hint: str) -> None:
        if self.sink is not None:
            self.sink.emit(payload, filename_hint)
