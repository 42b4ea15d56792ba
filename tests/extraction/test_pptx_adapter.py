from __future__ import annotations

from io import BytesIO
import logging
from zipfile import ZipFile

import pytest

from doctext.extraction.adapters.pptx_adapter import PPTXExtractor
from doctext.extraction.errors import CorruptArchive

_DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
_PRESENTATION_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"


def _part(root_tag: str, *paragraphs: list[str]) -> str:
    shapes = "".join(
        "<p:sp><p:txBody>"
        + "<a:p>"
        + "".join(f"<a:r><a:t>{run}</a:t></a:r>" for run in runs)
        + "</a:p></p:txBody></p:sp>"
        for runs in paragraphs
    )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:{root_tag} xmlns:a="{_DRAWING_NS}" xmlns:p="{_PRESENTATION_NS}">'
        f"<p:cSld><p:spTree>{shapes}<p:pic/></p:spTree></p:cSld></p:{root_tag}>"
    )


def _slide(*paragraphs: list[str]) -> str:
    return _part("sld", *paragraphs)


def _notes(*paragraphs: list[str]) -> str:
    return _part("notes", *paragraphs)


def _build_pptx(entries: dict[str, str]) -> bytes:
    buffer = BytesIO()
    with ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("ppt/presentation.xml", "<p:presentation/>")
        for name, payload in entries.items():
            archive.writestr(name, payload)
    return buffer.getvalue()


def test_empty_slides_are_skipped_and_ordinals_renumbered() -> None:
    payload = _build_pptx(
        {
            "ppt/slides/slide1.xml": _slide(["Quarterly", "review"], ["Agenda"]),
            "ppt/slides/slide2.xml": _slide(),
            "ppt/slides/slide3.xml": _slide(["Closing   remarks"]),
        }
    )

    result = PPTXExtractor().extract(payload)

    assert result.text == "Slide 1:\nQuarterly review Agenda\n\nSlide 2:\nClosing remarks"
    assert "Slide 3:" not in result.text


def test_slides_are_processed_in_lexicographic_path_order() -> None:
    payload = _build_pptx(
        {
            "ppt/slides/slide1.xml": _slide(["one"]),
            "ppt/slides/slide2.xml": _slide(["two"]),
            "ppt/slides/slide10.xml": _slide(["ten"]),
        }
    )

    result = PPTXExtractor().extract(payload)

    assert result.text == "Slide 1:\none\n\nSlide 2:\nten\n\nSlide 3:\ntwo"


def test_notes_are_appended_under_header() -> None:
    payload = _build_pptx(
        {
            "ppt/slides/slide1.xml": _slide(["Title"]),
            "ppt/slides/_rels/slide1.xml.rels": "<Relationships/>",
            "ppt/notesSlides/notesSlide1.xml": _notes(["Remember", "to", "smile"]),
            "ppt/notesSlides/notesSlide2.xml": _notes([]),
            "ppt/notesSlides/notesSlide3.xml": _notes(["Thank the team"]),
        }
    )

    result = PPTXExtractor().extract(payload)

    assert result.text == "Slide 1:\nTitle\n\nNotes:\nRemember to smile\n\nThank the team"


def test_notes_header_is_omitted_without_notes_text() -> None:
    payload = _build_pptx(
        {
            "ppt/slides/slide1.xml": _slide(["Only slide"]),
            "ppt/notesSlides/notesSlide1.xml": _notes(),
        }
    )

    assert PPTXExtractor().extract(payload).text == "Slide 1:\nOnly slide"


def test_malformed_slide_is_skipped_without_aborting(caplog: pytest.LogCaptureFixture) -> None:
    payload = _build_pptx(
        {
            "ppt/slides/slide1.xml": _slide(["Good"]),
            "ppt/slides/slide2.xml": "<p:sld><broken",
            "ppt/slides/slide3.xml": _slide(["Also good"]),
        }
    )

    with caplog.at_level(logging.WARNING):
        result = PPTXExtractor().extract(payload)

    assert result.text == "Slide 1:\nGood\n\nSlide 2:\nAlso good"
    assert "ppt/slides/slide2.xml" in caplog.text


def test_presentation_without_any_text_is_empty() -> None:
    payload = _build_pptx({"ppt/slides/slide1.xml": _slide()})

    result = PPTXExtractor().extract(payload)

    assert result.text == ""
    assert result.failure is None


def test_non_archive_payload_fails() -> None:
    result = PPTXExtractor().extract(b"not a presentation")

    assert result.text == ""
    assert isinstance(result.failure, CorruptArchive)
