"""
Export Formatter.

THIS MODULE HANDLES OUTPUT RENDERING ONLY.

Turns a sequence of records into the plain-text payload that gets copied
to the clipboard or saved as a file:

    <prefix> code1, code2, ..., code50
    <prefix> code51, code52, ...

Codes are grouped `group_size` per line, joined with ", ". A prefix, when
given, is written once at the start of every line. The output is a pure
function of its inputs, so identical selections always export to
identical bytes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cardsifter.config import EXPORT_GROUP_SIZE
from cardsifter.models.record import record_code

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cardsifter.models.record import Record

CODE_SEPARATOR = ", "
LINE_SEPARATOR = "\n"


def format_codes(
    records: Sequence[Record],
    group_size: int = EXPORT_GROUP_SIZE,
    prefix: str = "",
) -> str:
    """
    Format record codes as export text.

    Args:
        records: Records to export, in export order
        group_size: Codes per line (50 for bulk, 1 for one-per-line)
        prefix: Optional text written before each line; blank means none

    Returns:
        Lines joined by newline, without a trailing newline

    Raises:
        ValueError: If group_size < 1
    """
    if group_size < 1:
        raise ValueError(f"group_size must be at least 1, got {group_size}")

    codes = [record_code(record) for record in records]
    return LINE_SEPARATOR.join(
        _format_line(codes[start : start + group_size], prefix)
        for start in range(0, len(codes), group_size)
    )


def format_download(
    records: Sequence[Record],
    group_size: int = EXPORT_GROUP_SIZE,
    prefix: str = "",
) -> str:
    """Format codes as a text file: every line newline-terminated."""
    payload = format_codes(records, group_size, prefix)
    return payload + LINE_SEPARATOR if payload else ""


def _format_line(codes: list[str], prefix: str) -> str:
    """Format one line of codes."""
    line = CODE_SEPARATOR.join(codes)
    if prefix.strip():
        return f"{prefix} {line}"
    return line
