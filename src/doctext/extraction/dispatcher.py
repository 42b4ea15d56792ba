"""Format classification and the single extraction entry point."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

from doctext.extraction.adapters import (
    DEFAULT_PDF_BACKEND,
    PdfExtractorConfig,
    TextExtractor,
    build_default_extractors,
)
from doctext.extraction.models import ExtractionOutcome, FormatKind, SourceDocument

if TYPE_CHECKING:
    from doctext.config import DoctextSettings

logger = logging.getLogger(__name__)

_PDF_SUFFIXES = (".pdf",)
_WORD_SUFFIXES = (".docx", ".doc")
_PRESENTATION_SUFFIXES = (".pptx",)


def classify_document(filename: str, mime_hint: str) -> FormatKind:
    """Pick the extractor for a document; first matching rule wins.

    Either the declared MIME type or the filename extension is enough, since
    upload clients mislabel one or the other.
    """

    mime = (mime_hint or "").lower()
    name = (filename or "").lower()

    if "pdf" in mime or name.endswith(_PDF_SUFFIXES):
        return FormatKind.PDF
    if "word" in mime or name.endswith(_WORD_SUFFIXES):
        return FormatKind.DOCX
    if "presentation" in mime or name.endswith(_PRESENTATION_SUFFIXES):
        return FormatKind.PPTX
    return FormatKind.TEXT


class TextExtractionEngine:
    """Route documents to format extractors and normalize every outcome."""

    def __init__(self, extractors: Mapping[FormatKind, TextExtractor]) -> None:
        missing = [kind.value for kind in FormatKind if kind not in extractors]
        if missing:
            raise ValueError(f"No extractor registered for: {', '.join(missing)}")
        self._extractors = dict(extractors)

    @classmethod
    def with_pdf_backend(cls, backend: str = DEFAULT_PDF_BACKEND) -> "TextExtractionEngine":
        return cls(build_default_extractors(PdfExtractorConfig(backend=backend)))

    @property
    def extractors(self) -> dict[FormatKind, TextExtractor]:
        return dict(self._extractors)

    def extract(self, document: SourceDocument) -> ExtractionOutcome:
        """Extract trimmed text; never raises."""

        kind = classify_document(document.filename, document.mime_hint)
        extractor = self._extractors[kind]
        logger.debug(
            "Extracting %s as %s (%d bytes)",
            document.filename or "<unnamed>",
            kind.value,
            len(document.payload),
        )

        try:
            result = extractor.extract(document.payload)
        except Exception as exc:
            logger.exception("Extractor %s crashed on %s", kind.value, document.filename or "<unnamed>")
            return ExtractionOutcome(text="", format_kind=kind, error=f"Unexpected extractor failure: {exc}")

        error: str | None = None
        if result.failure is not None:
            error = str(result.failure)
            logger.warning(
                "%s extraction of %s degraded to empty text: %s",
                kind.value,
                document.filename or "<unnamed>",
                error,
            )
        return ExtractionOutcome(text=result.text, format_kind=kind, error=error)


def extract_text(
    payload: bytes,
    filename: str = "",
    mime_hint: str = "",
    *,
    settings: DoctextSettings | None = None,
    engine: TextExtractionEngine | None = None,
) -> ExtractionOutcome:
    """Extract text from one in-memory document; never raises.

    ``settings`` selects the PDF backend when no ``engine`` is given. An
    unusable backend yields an empty outcome carrying the configuration error.
    """

    if engine is None:
        backend = settings.pdf_backend if settings is not None else DEFAULT_PDF_BACKEND
        try:
            engine = TextExtractionEngine.with_pdf_backend(backend)
        except ValueError as exc:
            logger.error("Cannot build extraction engine: %s", exc)
            return ExtractionOutcome(
                text="",
                format_kind=classify_document(filename, mime_hint),
                error=f"Extraction engine unavailable: {exc}",
            )
    return engine.extract(SourceDocument(payload=payload, filename=filename, mime_hint=mime_hint))
