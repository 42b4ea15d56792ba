from __future__ import annotations

from doctext.extraction.adapters.text_adapter import PlainTextExtractor
from doctext.extraction.errors import DecodeFailure


def test_plain_text_is_decoded_and_trimmed() -> None:
    result = PlainTextExtractor().extract("  Заметки\nline two\n\n".encode("utf-8"))

    assert result.text == "Заметки\nline two"
    assert result.failure is None


def test_invalid_utf8_yields_decode_failure() -> None:
    result = PlainTextExtractor().extract(b"\x89PNG\r\n\x1a\n\xff\xfe\x00")

    assert result.text == ""
    assert isinstance(result.failure, DecodeFailure)


def test_foreign_encoding_is_not_sniffed() -> None:
    result = PlainTextExtractor().extract("Привет".encode("cp1251"))

    assert result.text == ""
