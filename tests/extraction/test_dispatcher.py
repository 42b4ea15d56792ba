from __future__ import annotations

from io import BytesIO
import logging
from zipfile import ZipFile

import pymupdf
import pytest

from doctext.config import DoctextSettings
from doctext.extraction import ExtractionOutcome, FormatKind, SourceDocument, TextExtractionEngine, extract_text
from doctext.extraction.adapters import ExtractorResult, build_default_extractors
from doctext.extraction.dispatcher import classify_document
from doctext.extraction.errors import DecodeFailure


class _RecordingExtractor:
    def __init__(self, kind: FormatKind, text: str = "", failure: Exception | None = None) -> None:
        self.format_kind = kind
        self.calls: list[bytes] = []
        self._text = text
        self._failure = failure

    def extract(self, payload: bytes) -> ExtractorResult:
        self.calls.append(payload)
        if self._failure is not None:
            raise self._failure
        return ExtractorResult.ok(self._text)


def _recording_engine(**overrides: _RecordingExtractor) -> tuple[TextExtractionEngine, dict[FormatKind, _RecordingExtractor]]:
    extractors = {kind: _RecordingExtractor(kind, text=f"{kind.value} text") for kind in FormatKind}
    for name, extractor in overrides.items():
        extractors[FormatKind(name)] = extractor
    return TextExtractionEngine(extractors), extractors


def _build_pptx() -> bytes:
    buffer = BytesIO()
    with ZipFile(buffer, "w") as archive:
        archive.writestr(
            "ppt/slides/slide1.xml",
            '<p:sld xmlns:a="urn:a" xmlns:p="urn:p"><a:t>Deck title</a:t></p:sld>',
        )
    return buffer.getvalue()


@pytest.mark.parametrize(
    ("filename", "mime_hint", "expected"),
    [
        ("x.docx", "application/pdf", FormatKind.PDF),
        ("REPORT.PDF", "", FormatKind.PDF),
        ("scan.bin", "Application/PDF", FormatKind.PDF),
        ("letter.docx", "", FormatKind.DOCX),
        ("legacy.DOC", "", FormatKind.DOCX),
        ("", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", FormatKind.DOCX),
        ("deck.pptx", "application/msword", FormatKind.DOCX),
        ("deck.pptx", "", FormatKind.PPTX),
        ("", "application/vnd.openxmlformats-officedocument.presentationml.presentation", FormatKind.PPTX),
        ("notes.md", "text/markdown", FormatKind.TEXT),
        ("", "", FormatKind.TEXT),
        ("archive.docx.zip", "application/zip", FormatKind.TEXT),
    ],
)
def test_classification_follows_fixed_priority(filename: str, mime_hint: str, expected: FormatKind) -> None:
    assert classify_document(filename, mime_hint) is expected


def test_pdf_mime_wins_over_docx_filename() -> None:
    engine, extractors = _recording_engine()

    outcome = engine.extract(SourceDocument(payload=b"%PDF", filename="x.docx", mime_hint="application/pdf"))

    assert outcome.format_kind is FormatKind.PDF
    assert outcome.text == "pdf text"
    assert extractors[FormatKind.PDF].calls == [b"%PDF"]
    assert extractors[FormatKind.DOCX].calls == []


def test_crashing_extractor_never_raises(caplog: pytest.LogCaptureFixture) -> None:
    engine, _ = _recording_engine(pptx=_RecordingExtractor(FormatKind.PPTX, failure=KeyError("boom")))

    with caplog.at_level(logging.ERROR):
        outcome = engine.extract(SourceDocument(payload=b"PK", filename="deck.pptx"))

    assert outcome.text == ""
    assert not outcome.succeeded
    assert outcome.error and "boom" in outcome.error
    assert "crashed" in caplog.text


def test_reported_failure_is_carried_on_outcome(caplog: pytest.LogCaptureFixture) -> None:
    failing = _RecordingExtractor(FormatKind.TEXT)
    failing.extract = lambda payload: ExtractorResult.failed(DecodeFailure("not utf-8"))  # type: ignore[method-assign]
    engine, _ = _recording_engine(text=failing)

    with caplog.at_level(logging.WARNING):
        outcome = engine.extract(SourceDocument(payload=b"\xff", filename="blob.bin"))

    assert outcome == ExtractionOutcome(text="", format_kind=FormatKind.TEXT, error="not utf-8")
    assert "degraded to empty text" in caplog.text


def test_engine_requires_an_extractor_for_every_format() -> None:
    extractors = build_default_extractors()
    del extractors[FormatKind.PPTX]

    with pytest.raises(ValueError, match="pptx"):
        TextExtractionEngine(extractors)


def test_fallback_returns_trimmed_utf8_text() -> None:
    outcome = extract_text(b"hello\n", filename="hello.txt", mime_hint="text/plain")

    assert outcome.text == "hello"
    assert outcome.succeeded is True
    assert outcome.format_kind is FormatKind.TEXT


def test_fallback_on_binary_reports_failure() -> None:
    outcome = extract_text(b"\x00\xff\xfe\xfa binary", filename="image.raw")

    assert outcome.text == ""
    assert outcome.succeeded is False


def test_pdf_document_is_extracted_end_to_end() -> None:
    doc = pymupdf.open()
    doc.new_page().insert_text((72, 72), "Invoice 42")
    payload = doc.tobytes()
    doc.close()

    outcome = extract_text(payload, filename="invoice.pdf")

    assert outcome.succeeded
    assert outcome.text == "Invoice 42"


def test_extraction_is_idempotent() -> None:
    engine = TextExtractionEngine.with_pdf_backend()
    document = SourceDocument(payload=_build_pptx(), filename="deck.pptx", mime_hint="")

    first = engine.extract(document)
    second = engine.extract(document)

    assert first == second
    assert first.text == "Slide 1:\nDeck title"


@pytest.mark.parametrize(
    ("payload", "filename"),
    [(b"", "empty.pdf"), (b"", "empty.docx"), (b"", "empty.pptx"), (b"   \n\t", "blank.txt")],
)
def test_success_flag_matches_non_empty_text(payload: bytes, filename: str) -> None:
    outcome = extract_text(payload, filename=filename)

    assert outcome.succeeded is bool(outcome.text)
    assert outcome.text == outcome.text.strip()
    assert outcome.succeeded is False


def test_outcome_text_is_always_trimmed() -> None:
    outcome = ExtractionOutcome(text="  padded \n", format_kind=FormatKind.TEXT)

    assert outcome.text == "padded"
    assert outcome.succeeded


def test_unknown_pdf_backend_in_settings_yields_empty_outcome(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        outcome = extract_text(b"hello", filename="a.txt", settings=DoctextSettings(pdf_backend="bogus"))

    assert outcome.text == ""
    assert outcome.succeeded is False
    assert outcome.format_kind is FormatKind.TEXT
    assert "Unknown PDF backend" in (outcome.error or "")
    assert "Cannot build extraction engine" in caplog.text


def test_settings_backend_is_used_for_pdf_documents() -> None:
    doc = pymupdf.open()
    doc.new_page().insert_text((72, 72), "Invoice 7")
    payload = doc.tobytes()
    doc.close()

    outcome = extract_text(payload, filename="invoice.pdf", settings=DoctextSettings(pdf_backend="pypdf"))

    assert outcome.succeeded
    assert "Invoice 7" in outcome.text
