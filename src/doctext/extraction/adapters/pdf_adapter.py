"""PDF extractor producing page-ordered plain text."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from doctext.extraction.adapters.base import ExtractorResult
from doctext.extraction.adapters.pdf_backends import (
    DEFAULT_PDF_BACKEND,
    PdfBackend,
    PdfDocumentHandle,
    resolve_pdf_backend,
)
from doctext.extraction.errors import UnparsablePdf
from doctext.extraction.models import FormatKind, PageTextRun

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = " "
PAGE_SEPARATOR = "\n\n"


@dataclass(frozen=True, slots=True)
class PdfExtractorConfig:
    """Construction-time options for :class:`PDFExtractor`."""

    backend: str = DEFAULT_PDF_BACKEND


class PDFExtractor:
    """Extract text runs page by page; one bad page never aborts the document."""

    format_kind = FormatKind.PDF

    def __init__(
        self,
        config: PdfExtractorConfig | None = None,
        *,
        backend: PdfBackend | None = None,
    ) -> None:
        self._config = config or PdfExtractorConfig()
        self._backend = backend if backend is not None else resolve_pdf_backend(self._config.backend)

    @property
    def backend_name(self) -> str:
        return self._backend.name

    def extract(self, payload: bytes) -> ExtractorResult:
        try:
            document = self._backend.open(payload)
        except UnparsablePdf as exc:
            return ExtractorResult.failed(exc)

        try:
            runs = self.extract_pages(document)
        finally:
            document.close()

        text = PAGE_SEPARATOR.join(run.text for run in runs).strip()
        if not text and runs:
            logger.debug("PDF has %d page(s) but no extractable text", len(runs))
        return ExtractorResult.ok(text)

    def extract_pages(self, document: PdfDocumentHandle) -> list[PageTextRun]:
        runs: list[PageTextRun] = []
        for page_index in range(1, document.page_count + 1):
            try:
                fragments = document.page_fragments(page_index)
            except Exception as exc:
                logger.warning("Skipping unreadable PDF page %d: %s", page_index, exc)
                fragments = []
            runs.append(PageTextRun(page_index=page_index, text=FRAGMENT_SEPARATOR.join(fragments)))
        return runs
