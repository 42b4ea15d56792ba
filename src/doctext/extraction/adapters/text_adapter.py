"""Last-resort decoder for payloads that match no container format."""

from __future__ import annotations

from doctext.extraction.adapters.base import ExtractorResult
from doctext.extraction.errors import DecodeFailure
from doctext.extraction.models import FormatKind


class PlainTextExtractor:
    """Strict UTF-8 interpretation of the whole buffer.

    No charset sniffing: binary or foreign-encoding content comes back empty.
    """

    format_kind = FormatKind.TEXT

    def extract(self, payload: bytes) -> ExtractorResult:
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            return ExtractorResult.failed(DecodeFailure(f"Payload is not valid UTF-8: {exc.reason}"))
        return ExtractorResult.ok(text)
