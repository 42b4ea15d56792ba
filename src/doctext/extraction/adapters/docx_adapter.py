"""Raw-text extractor for Office Open XML word-processing documents."""

from __future__ import annotations

import posixpath

from doctext.extraction.adapters.base import ExtractorResult
from doctext.extraction.archive import Archive
from doctext.extraction.errors import ExtractionError
from doctext.extraction.models import FormatKind, XmlElement
from doctext.extraction.xml_text import collect_text, find_elements, parse_xml

PACKAGE_RELS_PATH = "_rels/.rels"
DEFAULT_BODY_PATH = "word/document.xml"
_OFFICE_DOCUMENT_REL_SUFFIX = "/officeDocument"

PARAGRAPH_SEPARATOR = "\n\n"
_RUN_TEXT_TAGS = frozenset({"t"})
_RUN_MARKERS = {"tab": "\t", "br": "\n", "cr": "\n"}
# property subtrees carry tab-stop definitions that must not become text;
# AlternateContent repeats text boxes in Choice and Fallback, only Fallback is read
_SKIPPED_TAGS = frozenset({"pPr", "rPr", "Choice"})


def main_document_path(archive: Archive) -> str:
    """Resolve the body part via the package relationships, if present."""

    if not archive.has_entry(PACKAGE_RELS_PATH):
        return DEFAULT_BODY_PATH

    relationships = parse_xml(archive.read_bytes(PACKAGE_RELS_PATH))
    for relationship in find_elements(relationships, "Relationship"):
        if not relationship.attrs.get("Type", "").endswith(_OFFICE_DOCUMENT_REL_SUFFIX):
            continue
        target = relationship.attrs.get("Target", "").strip().lstrip("/")
        if target:
            return posixpath.normpath(target)
    return DEFAULT_BODY_PATH


def paragraph_text(paragraph: XmlElement) -> str:
    fragments = collect_text(
        paragraph,
        _RUN_TEXT_TAGS,
        markers=_RUN_MARKERS,
        skip_tags=_SKIPPED_TAGS,
    )
    return "".join(fragments)


class DOCXExtractor:
    """Strip markup from the main document part, one paragraph per block.

    Legacy binary ``.doc`` payloads are routed here as well and fail to open
    as an archive, which is reported as an empty result.
    """

    format_kind = FormatKind.DOCX

    def extract(self, payload: bytes) -> ExtractorResult:
        try:
            with Archive.open(payload) as archive:
                body = parse_xml(archive.read_bytes(main_document_path(archive)))
        except ExtractionError as exc:
            return ExtractorResult.failed(exc)

        paragraphs = [paragraph_text(paragraph) for paragraph in find_elements(body, "p")]
        return ExtractorResult.ok(PARAGRAPH_SEPARATOR.join(paragraphs))
