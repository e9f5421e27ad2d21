"""
Command-line card browser.

Loads a card export (file path or URL), applies filters, and either shows
a page of results, saves the codes as a text file, or runs the batch copy
machine until every code has been copied once.

    cardsifter view cards.csv --series naruto --sort wishlists --desc
    cardsifter export cards.csv --prefix "kt t1" --output exports/
    cardsifter batches cards.csv --codes "a1, a2, a3"
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any, TextIO

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from cardsifter.config import settings
from cardsifter.models.criteria import FilterCriteria
from cardsifter.models.failure import FailureKind, KnownError
from cardsifter.models.record import Record, field_value
from cardsifter.services.dataset_loader import load_records
from cardsifter.services.export_sink import FileSink, StreamSink
from cardsifter.services.session import BrowserSession

logger = logging.getLogger(__name__)

# Columns shown by `view`, with display widths
TABLE_COLUMNS: tuple[tuple[str, int], ...] = (
    ("code", 8),
    ("number", 7),
    ("edition", 7),
    ("character", 24),
    ("series", 28),
    ("wishlists", 9),
    ("tag", 12),
)

# Flag -> criteria field, for text and numeric filters
_VALUE_FILTERS = (
    "codes",
    "series",
    "blacklist_series",
    "blacklist_character",
    "blacklist_tag",
    "number_from",
    "number_to",
    "wishlists_from",
    "wishlists_to",
    "tag",
)

# Flag -> criteria field, for on/off filters
_SWITCH_FILTERS = (
    "morphed",
    "trimmed",
    "frame",
    "has_dye_name",
    "none_tag",
    "exclude_frame",
    "exclude_morphed",
    "exclude_trimmed",
    "exclude_dye_name",
)


def _filter_parent() -> argparse.ArgumentParser:
    """Arguments shared by every subcommand."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("source", help="Path or http(s) URL of a card export CSV")
    parent.add_argument(
        "--filters",
        type=Path,
        help="JSON file with saved filter criteria (flags override it)",
    )
    parent.add_argument("--prefix", default="", help="Text written before each line of codes")
    parent.add_argument("--verbose", "-v", action="store_true", help="Log progress")

    group = parent.add_argument_group("filters")
    group.add_argument("--codes", help="Comma-separated codes; overrides all other filters")
    group.add_argument("--series", help="Comma-separated series to include")
    group.add_argument("--blacklist-series", help="Comma-separated series to exclude")
    group.add_argument("--blacklist-character", help="Comma-separated characters to exclude")
    group.add_argument("--blacklist-tag", help="Comma-separated tags to exclude")
    group.add_argument("--number-from", type=int)
    group.add_argument("--number-to", type=int)
    group.add_argument("--wishlists-from", type=int)
    group.add_argument("--wishlists-to", type=int)
    group.add_argument(
        "--edition",
        action="append",
        dest="editions",
        help="Allowed edition (repeatable)",
    )
    group.add_argument("--tag", help="Tag must contain this text")
    group.add_argument("--none-tag", action="store_true", help="Only cards without a tag")
    group.add_argument("--morphed", action="store_true")
    group.add_argument("--trimmed", action="store_true")
    group.add_argument("--frame", action="store_true", help="Only cards with a frame")
    group.add_argument("--has-dye-name", action="store_true", help="Only dyed cards")
    group.add_argument("--exclude-frame", action="store_true")
    group.add_argument("--exclude-morphed", action="store_true")
    group.add_argument("--exclude-trimmed", action="store_true")
    group.add_argument("--exclude-dye-name", action="store_true")
    return parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardsifter",
        description=f"{settings.app_name}: filter, page through and export card collection exports",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    parent = _filter_parent()

    view = subparsers.add_parser("view", parents=[parent], help="Show one page of results")
    view.add_argument("--sort", help="Column to sort on (e.g. wishlists, series)")
    view.add_argument("--desc", action="store_true", help="Sort descending")
    view.add_argument("--page", type=int, default=1)
    view.add_argument("--page-size", type=int, default=settings.default_page_size)

    export = subparsers.add_parser("export", parents=[parent], help="Save codes as a text file")
    export.add_argument(
        "--output",
        type=Path,
        default=Path("."),
        help="Directory to write the file into (default: current directory)",
    )
    export.add_argument("--one-per-line", action="store_true", help="One code per line")

    batches = subparsers.add_parser(
        "batches",
        parents=[parent],
        help="Copy codes batch by batch until all are copied",
    )
    batches.add_argument("--single", action="store_true", help="One code per batch")

    return parser


def build_criteria(args: argparse.Namespace) -> FilterCriteria:
    """
    Merge a saved filter file with command-line flags.

    Raises:
        KnownError: If the filter file is unreadable or a value is invalid
    """
    data: dict[str, Any] = {}
    if args.filters is not None:
        try:
            data = json.loads(args.filters.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise KnownError(
                kind=FailureKind.INVALID_INPUT,
                message=f"Could not read filter file {args.filters}",
                detail=str(e),
            ) from e
        if not isinstance(data, dict):
            raise KnownError(
                kind=FailureKind.INVALID_INPUT,
                message=f"Filter file {args.filters} must hold a JSON object.",
            )

    for name in _VALUE_FILTERS:
        value = getattr(args, name)
        if value is not None:
            data[to_camel(name)] = value
    for name in _SWITCH_FILTERS:
        if getattr(args, name):
            data[to_camel(name)] = True
    if args.editions:
        data["editions"] = args.editions

    try:
        return FilterCriteria.model_validate(data)
    except ValidationError as e:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Invalid filter criteria.",
            detail=str(e),
        ) from e


def format_table(records: Sequence[Record]) -> str:
    """Render rows as a fixed-width text table."""

    def cell(value: str, width: int) -> str:
        if len(value) > width:
            value = value[: width - 1] + "…"
        return value.ljust(width)

    header = " ".join(cell(name, width) for name, width in TABLE_COLUMNS)
    lines = [header, "-" * len(header)]
    for record in records:
        lines.append(
            " ".join(cell(field_value(record, name), width) for name, width in TABLE_COLUMNS)
        )
    return "\n".join(line.rstrip() for line in lines)


def run_view(session: BrowserSession, args: argparse.Namespace, out: TextIO) -> None:
    if args.sort:
        session.toggle_sort(args.sort)
        if args.desc:
            session.toggle_sort(args.sort)
    session.set_page_size(args.page_size)
    session.go_to_page(args.page)

    view = session.view()
    out.write(format_table(view.page.items) + "\n")
    out.write(
        f"Page {view.page.page_index}/{view.page.total_pages}"
        f"  Results ({view.counts_label})\n"
    )
    if view.not_found:
        out.write(f"Not found: {', '.join(view.not_found)}\n")


def run_export(session: BrowserSession, args: argparse.Namespace, out: TextIO) -> None:
    sink = FileSink(args.output)
    session.sink = sink
    session.download(prefix=args.prefix, one_per_line=args.one_per_line)
    out.write(f"Saved {len(session.filtered)} codes to {sink.written[-1]}\n")


def run_batches(session: BrowserSession, args: argparse.Namespace, out: TextIO) -> None:
    if not session.filtered:
        out.write("No cards match the filters.\n")
        return

    session.sink = StreamSink(out)
    while not session.exporter.is_exhausted:
        result = session.copy_one(args.prefix) if args.single else session.copy_batch(args.prefix)
        logger.info(result.summary)


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    """CLI entrypoint. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    out = out or sys.stdout

    logging.basicConfig(
        level=logging.INFO if args.verbose or settings.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        criteria = build_criteria(args)
        records = asyncio.run(load_records(args.source))

        session = BrowserSession(prefix=args.prefix)
        session.load_dataset(records)
        session.apply_filters(criteria)

        if args.command == "view":
            run_view(session, args, out)
        elif args.command == "export":
            run_export(session, args, out)
        else:
            run_batches(session, args, out)
    except KnownError as e:
        detail = e.to_detail()
        print(f"Error: {detail.message}", file=sys.stderr)
        if detail.detail:
            print(f"  {detail.detail}", file=sys.stderr)
        if detail.suggestion:
            print(f"  {detail.suggestion}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
