from cardsifter.services.batch_export import (
    BatchExporter,
    ExportMode,
    ExportPhase,
    ExportResult,
)
from cardsifter.services.dataset_loader import (
    fetch_records,
    load_records,
    load_records_from_file,
)
from cardsifter.services.export_formatter import format_codes, format_download
from cardsifter.services.export_sink import ExportSink, FileSink, StreamSink
from cardsifter.services.session import BrowserSession, SessionView

__all__ = [
    "BatchExporter",
    "BrowserSession",
    "ExportMode",
    "ExportPhase",
    "ExportResult",
    "ExportSink",
    "FileSink",
    "SessionView",
    "StreamSink",
    "fetch_records",
    "format_codes",
    "format_download",
    "load_records",
    "load_records_from_file",
]
