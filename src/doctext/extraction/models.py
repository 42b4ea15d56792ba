"""Canonical data structures shared by the extraction core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class FormatKind(Enum):
    PDF = "pdf"
    DOCX = "docx"
    PPTX = "pptx"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Raw document payload plus the hints used to classify it."""

    payload: bytes
    filename: str = ""
    mime_hint: str = ""


@dataclass(frozen=True, slots=True)
class ExtractionOutcome:
    """Normalized result of one extraction call.

    ``text`` is always trimmed; ``succeeded`` is derived from it so the two can
    never disagree.
    """

    text: str = ""
    format_kind: FormatKind = FormatKind.TEXT
    error: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", (self.text or "").strip())

    @property
    def succeeded(self) -> bool:
        return bool(self.text)


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """One named member of a ZIP container."""

    path: str
    payload: bytes | str


@dataclass(frozen=True, slots=True)
class PageTextRun:
    """Joined text fragments of one PDF page (1-based)."""

    page_index: int
    text: str


@dataclass(frozen=True, slots=True)
class XmlText:
    value: str


@dataclass(frozen=True, slots=True)
class XmlElement:
    """Parsed XML element with its qualified name and ordered children."""

    name: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: tuple["XmlNode", ...] = ()


XmlNode = Union[XmlElement, XmlText]
