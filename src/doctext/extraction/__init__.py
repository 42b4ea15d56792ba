"""Format-dispatching plain-text extraction core."""

from .dispatcher import TextExtractionEngine, classify_document, extract_text
from .errors import (
    CorruptArchive,
    DecodeFailure,
    EntryMissing,
    ExtractionError,
    UnparsablePdf,
    UnparsableXml,
)
from .models import ExtractionOutcome, FormatKind, SourceDocument

__all__ = [
    "CorruptArchive",
    "DecodeFailure",
    "EntryMissing",
    "ExtractionError",
    "ExtractionOutcome",
    "FormatKind",
    "SourceDocument",
    "TextExtractionEngine",
    "UnparsablePdf",
    "UnparsableXml",
    "classify_document",
    "extract_text",
]
