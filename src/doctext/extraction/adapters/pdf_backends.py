"""PDF parsing backends selectable by name.

A backend is chosen once, from explicit configuration, when the PDF extractor
is built. There is no runtime probing between libraries: asking for a backend
whose library is not installed is a configuration error.
"""

from __future__ import annotations

from io import BytesIO
from typing import Callable, Protocol, runtime_checkable

from doctext.extraction.errors import UnparsablePdf

DEFAULT_PDF_BACKEND = "pymupdf"
PDF_BACKENDS = ("pymupdf", "pypdf")


@runtime_checkable
class PdfDocumentHandle(Protocol):
    """An opened PDF exposing per-page positioned text fragments."""

    page_count: int

    def page_fragments(self, page_index: int) -> list[str]:
        """Return text-run fragments of 1-based page ``page_index``."""

    def close(self) -> None:
        """Release parser resources."""


@runtime_checkable
class PdfBackend(Protocol):
    name: str

    def open(self, payload: bytes) -> PdfDocumentHandle:
        """Parse ``payload``; raise :class:`UnparsablePdf` when that is impossible."""


class _PyMuPDFDocument:
    def __init__(self, document) -> None:
        self._document = document
        self.page_count = int(document.page_count)

    def page_fragments(self, page_index: int) -> list[str]:
        page = self._document.load_page(page_index - 1)
        content = page.get_text("dict")
        fragments: list[str] = []
        for block in content.get("blocks", []):
            # type 1 blocks are images
            if block.get("type") != 0:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if text.strip():
                        fragments.append(text)
        return fragments

    def close(self) -> None:
        self._document.close()


class PyMuPDFBackend:
    """Text runs are the spans of ``page.get_text("dict")``."""

    name = "pymupdf"

    def __init__(self) -> None:
        import pymupdf

        self._pymupdf = pymupdf

    def open(self, payload: bytes) -> PdfDocumentHandle:
        try:
            document = self._pymupdf.open(stream=payload, filetype="pdf")
        except Exception as exc:
            raise UnparsablePdf(f"pymupdf cannot open document: {exc}") from exc
        return _PyMuPDFDocument(document)


class _PypdfDocument:
    def __init__(self, reader) -> None:
        self._reader = reader
        self.page_count = len(reader.pages)

    def page_fragments(self, page_index: int) -> list[str]:
        page = self._reader.pages[page_index - 1]
        fragments: list[str] = []

        def _visit(text, _cm, _tm, _font_dict, _font_size) -> None:
            if text and text.strip():
                fragments.append(text)

        page.extract_text(visitor_text=_visit)
        return fragments

    def close(self) -> None:
        self._reader.stream.close()


class PypdfBackend:
    """Text runs are the fragments reported to ``visitor_text``."""

    name = "pypdf"

    def __init__(self) -> None:
        from pypdf import PdfReader

        self._reader_factory = PdfReader

    def open(self, payload: bytes) -> PdfDocumentHandle:
        try:
            reader = self._reader_factory(BytesIO(payload))
            return _PypdfDocument(reader)
        except Exception as exc:
            raise UnparsablePdf(f"pypdf cannot open document: {exc}") from exc


_BACKEND_FACTORIES: dict[str, Callable[[], PdfBackend]] = {
    "pymupdf": PyMuPDFBackend,
    "pypdf": PypdfBackend,
}


def resolve_pdf_backend(name: str) -> PdfBackend:
    """Instantiate the backend configured under ``name``."""

    key = (name or "").strip().lower()
    factory = _BACKEND_FACTORIES.get(key)
    if factory is None:
        supported = ", ".join(PDF_BACKENDS)
        raise ValueError(f"Unknown PDF backend {name!r}; expected one of: {supported}")
    try:
        return factory()
    except ImportError as exc:
        raise ValueError(f"PDF backend {key!r} is configured but its library is not installed") from exc
