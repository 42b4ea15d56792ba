"""Per-format extractor implementations and their shared contract."""

from __future__ import annotations

from doctext.extraction.models import FormatKind

from .base import ExtractorResult, TextExtractor
from .docx_adapter import DOCXExtractor
from .pdf_adapter import PDFExtractor, PdfExtractorConfig
from .pdf_backends import DEFAULT_PDF_BACKEND, PDF_BACKENDS, PdfBackend, resolve_pdf_backend
from .pptx_adapter import PPTXExtractor
from .text_adapter import PlainTextExtractor


def build_default_extractors(pdf_config: PdfExtractorConfig | None = None) -> dict[FormatKind, TextExtractor]:
    """Return one extractor per format kind, PDF backend resolved from ``pdf_config``."""

    return {
        FormatKind.PDF: PDFExtractor(pdf_config),
        FormatKind.DOCX: DOCXExtractor(),
        FormatKind.PPTX: PPTXExtractor(),
        FormatKind.TEXT: PlainTextExtractor(),
    }


__all__ = [
    "DEFAULT_PDF_BACKEND",
    "DOCXExtractor",
    "ExtractorResult",
    "PDFExtractor",
    "PDF_BACKENDS",
    "PPTXExtractor",
    "PdfBackend",
    "PdfExtractorConfig",
    "PlainTextExtractor",
    "TextExtractor",
    "build_default_extractors",
    "resolve_pdf_backend",
]
