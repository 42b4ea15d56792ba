"""Slide and speaker-notes text extractor for PPTX presentations."""

from __future__ import annotations

import logging

from doctext.extraction.adapters.base import ExtractorResult
from doctext.extraction.archive import Archive
from doctext.extraction.errors import ExtractionError
from doctext.extraction.models import FormatKind
from doctext.extraction.normalization import join_sections, normalize_whitespace
from doctext.extraction.xml_text import collect_text, parse_xml

logger = logging.getLogger(__name__)

SLIDES_PREFIX = "ppt/slides/"
NOTES_PREFIX = "ppt/notesSlides/"
XML_SUFFIX = ".xml"
NOTES_HEADER = "\n\nNotes:\n"
_RUN_TEXT_TAGS = frozenset({"t"})


def _entry_text(archive: Archive, path: str) -> str:
    """Whitespace-collapsed text of every run in one slide part."""

    try:
        root = parse_xml(archive.read_text(path))
    except ExtractionError as exc:
        logger.warning("Skipping unreadable presentation part %s: %s", path, exc)
        return ""
    return normalize_whitespace(" ".join(collect_text(root, _RUN_TEXT_TAGS)))


def collect_part_texts(archive: Archive, prefix: str) -> list[str]:
    """Non-empty part texts under ``prefix`` in lexicographic path order.

    ``slide10.xml`` sorts before ``slide2.xml``; the numbering downstream
    follows that order.
    """

    texts: list[str] = []
    for path in archive.list_entries(prefix, XML_SUFFIX):
        text = _entry_text(archive, path)
        if text:
            texts.append(text)
    return texts


class PPTXExtractor:
    """Label non-empty slides in order and append speaker notes."""

    format_kind = FormatKind.PPTX

    def extract(self, payload: bytes) -> ExtractorResult:
        try:
            archive = Archive.open(payload)
        except ExtractionError as exc:
            return ExtractorResult.failed(exc)

        with archive:
            slides = collect_part_texts(archive, SLIDES_PREFIX)
            notes = collect_part_texts(archive, NOTES_PREFIX)

        labelled = [f"Slide {ordinal}:\n{text}" for ordinal, text in enumerate(slides, start=1)]
        text = join_sections(labelled)
        notes_text = join_sections(notes)
        if notes_text:
            text = f"{text}{NOTES_HEADER}{notes_text}"
        return ExtractorResult.ok(text)
