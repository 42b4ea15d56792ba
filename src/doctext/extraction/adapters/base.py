"""Shared contract for per-format text extractors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from doctext.extraction.errors import ExtractionError
from doctext.extraction.models import FormatKind


@dataclass(frozen=True, slots=True)
class ExtractorResult:
    """Text produced by one extractor, plus the failure that cut it short."""

    text: str = ""
    failure: ExtractionError | None = None

    @classmethod
    def ok(cls, text: str) -> "ExtractorResult":
        return cls(text=text.strip())

    @classmethod
    def failed(cls, failure: ExtractionError) -> "ExtractorResult":
        return cls(text="", failure=failure)


@runtime_checkable
class TextExtractor(Protocol):
    """Protocol that every format extractor must implement."""

    format_kind: FormatKind

    def extract(self, payload: bytes) -> ExtractorResult:
        """Extract plain text; recoverable failures are returned, not raised."""
