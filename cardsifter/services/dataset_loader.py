"""
Dataset acquisition from a local file or a URL.

Loading is all-or-nothing: either the whole source is read and parsed
into records, or a LoadError is raised and nothing reaches the session.
"""

import logging
from pathlib import Path

import httpx

from cardsifter.config import settings
from cardsifter.models.failure import FailureKind, LoadError
from cardsifter.models.record import Record
from cardsifter.parsers.csv_records import parse_csv_records

logger = logging.getLogger(__name__)

# Content types that are certainly not a CSV export
_HTML_TYPES = ("text/html", "application/xhtml+xml")


def is_url(source: str) -> bool:
    """True for http(s) sources."""
    return source.startswith(("http://", "https://"))


def load_records_from_file(path: Path) -> list[Record]:
    """
    Read and parse a CSV (or .txt) export from disk.

    Raises:
        LoadError: If the file is missing, unreadable or not a card export
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise LoadError(
            kind=FailureKind.NOT_FOUND,
            message=f"File not found: {path}",
            source=str(path),
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(
            kind=FailureKind.INVALID_INPUT,
            message=f"Could not read {path}",
            source=str(path),
            detail=str(e),
        ) from e

    records = parse_csv_records(text, source=str(path))
    logger.info("Loaded %d records from %s", len(records), path)
    return records


async def fetch_records(
    url: str,
    client: httpx.AsyncClient | None = None,
) -> list[Record]:
    """
    Download and parse a CSV export.

    Args:
        url: Address of the CSV file
        client: Optional client to reuse; by default one is created with
            the configured timeout and proxy

    Raises:
        LoadError: On network or HTTP failure, or when the body is not CSV
    """
    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=settings.fetch_timeout,
                proxy=settings.http_proxy or None,
                follow_redirects=True,
            ) as own_client:
                response = await own_client.get(url)
        else:
            response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise LoadError(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f"Failed to fetch {url}: HTTP {e.response.status_code}",
            source=url,
        ) from e
    except httpx.RequestError as e:
        raise LoadError(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f"Failed to fetch {url}: {e}",
            source=url,
            suggestion="Check the address and your network connection.",
        ) from e

    content_type = response.headers.get("content-type", "").lower()
    if content_type.startswith(_HTML_TYPES):
        raise LoadError(
            kind=FailureKind.INVALID_INPUT,
            message="The URL returned a web page, not a CSV file.",
            source=url,
            detail=f"Content-Type: {content_type}",
            suggestion="Use a direct link to the raw CSV file.",
        )

    records = parse_csv_records(response.text, source=url)
    logger.info("Fetched %d records from %s", len(records), url)
    return records


async def load_records(source: str) -> list[Record]:
    """Load records from a path or an http(s) URL."""
    if is_url(source):
        return await fetch_records(source)
    return load_records_from_file(Path(source))
