"""Whitespace helpers shared by the extractors."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def join_sections(sections: list[str], separator: str = "\n\n") -> str:
    """Join non-empty sections with ``separator`` and trim the result."""

    return separator.join(section for section in sections if section).strip()
