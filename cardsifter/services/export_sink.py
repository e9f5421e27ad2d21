"""
Export sinks, where payloads go once they are formatted.

The pipeline only produces payload strings. A sink performs the actual
clipboard write or file save. In the command-line tool, standard output
stands in for the clipboard.
"""

import logging
import sys
from pathlib import Path
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)


class ExportSink(Protocol):
    """Receives a finished payload."""

    def emit(self, payload: str, filename_hint: str) -> None: ...


class StreamSink:
    """Writes payloads to a text stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def emit(self, payload: str, filename_hint: str) -> None:  # noqa: ARG002
        self.stream.write(payload)
        if not payload.endswith("\n"):
            self.stream.write("\n")


class FileSink:
    """Saves payloads as files in a directory."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory or Path.cwd()
        self.written: list[Path] = []

    def emit(self, payload: str, filename_hint: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename_hint
        path.write_text(payload, encoding="utf-8", newline="")
        self.written.append(path)
        logger.info("Saved export to %s", path)
