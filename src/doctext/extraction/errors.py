"""Recoverable failure taxonomy for the extraction core.

None of these ever escape :func:`doctext.extraction.dispatcher.extract_text`;
extractors catch them at the smallest scope they can and report them through
``ExtractorResult.failure``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ExtractionError(Exception):
    """Base class for local, recoverable extraction failures."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class CorruptArchive(ExtractionError):
    """The buffer (or one member) is not a readable ZIP container."""


@dataclass(slots=True)
class EntryMissing(ExtractionError):
    """A required archive member does not exist."""

    path: str = ""

    def __str__(self) -> str:
        return f"{self.message} (entry={self.path})"


@dataclass(slots=True)
class UnparsablePdf(ExtractionError):
    """The PDF structure cannot be read at all."""


@dataclass(slots=True)
class UnparsableXml(ExtractionError):
    """An archive member is not well-formed XML."""


@dataclass(slots=True)
class DecodeFailure(ExtractionError):
    """Bytes are not valid UTF-8."""
