"""
Parser for card export CSV files.

Expected layout: one header row naming the columns, then one row per card.
Column order is free; only the `code` column is required. Every value is
kept as text; numeric columns are coerced later, where they are compared.
"""

import csv
from io import StringIO

from cardsifter.models.failure import FailureKind, LoadError
from cardsifter.models.record import CODE, Record

BOM = "\ufeff"


def parse_csv_records(text: str, source: str | None = None) -> list[Record]:
    """
    Parse CSV text into records.

    - Header names are trimmed
    - Short rows are padded with ""; surplus cells are dropped
    - Rows with every cell blank are skipped

    Args:
        text: Raw CSV text
        source: Where the text came from, for error messages

    Returns:
        List of records in file order

    Raises:
        LoadError: If the text is empty, is not a card export, or has no rows
    """
    text = text.removeprefix(BOM)
    if not text.strip():
        raise LoadError(
            kind=FailureKind.EMPTY_RESULT,
            message="The file is empty.",
            source=source,
        )

    reader = csv.DictReader(StringIO(text), restval="")

    try:
        fieldnames = [name.strip() for name in reader.fieldnames or []]
        reader.fieldnames = fieldnames

        if CODE not in fieldnames:
            raise LoadError(
                kind=FailureKind.INVALID_INPUT,
                message="This does not look like a card export: no 'code' column.",
                source=source,
                detail=f"Columns found: {', '.join(fieldnames[:10]) or 'none'}",
                suggestion="Export your collection as CSV and load that file.",
            )

        records: list[Record] = []
        for row in reader:
            record = {name: value or "" for name, value in row.items() if name is not None}
            if not any(value.strip() for value in record.values()):
                continue
            records.append(record)
    except csv.Error as e:
        raise LoadError(
            kind=FailureKind.INVALID_INPUT,
            message="The file could not be read as CSV.",
            source=source,
            detail=str(e),
        ) from e

    if not records:
        raise LoadError(
            kind=FailureKind.EMPTY_RESULT,
            message="The file has a header but no cards.",
            source=source,
        )

    return records
