from __future__ import annotations

import logging
from pathlib import Path

import pytest

from doctext.config import DEFAULT_MAX_UPLOAD_BYTES, DoctextSettings


def test_settings_defaults_when_environment_is_empty() -> None:
    settings = DoctextSettings.from_env({})

    assert settings.db_path == Path(".doctext.db")
    assert settings.storage_dir == Path(".doctext-storage")
    assert settings.pdf_backend == "pymupdf"
    assert settings.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert settings.logging_level == logging.INFO
    assert settings.pdf_config.backend == "pymupdf"


def test_settings_read_overrides() -> None:
    settings = DoctextSettings.from_env(
        {
            "DOCTEXT_DB_PATH": "/tmp/docs.db",
            "DOCTEXT_STORAGE_DIR": "/tmp/blobs",
            "DOCTEXT_PDF_BACKEND": " PyPDF ",
            "DOCTEXT_MAX_UPLOAD_BYTES": "2048",
            "DOCTEXT_LOG_LEVEL": "debug",
        }
    )

    assert settings.db_path == Path("/tmp/docs.db")
    assert settings.storage_dir == Path("/tmp/blobs")
    assert settings.pdf_backend == "pypdf"
    assert settings.max_upload_bytes == 2048
    assert settings.logging_level == logging.DEBUG


@pytest.mark.parametrize(
    ("environ", "variable"),
    [
        ({"DOCTEXT_DB_PATH": "  "}, "DOCTEXT_DB_PATH"),
        ({"DOCTEXT_STORAGE_DIR": ""}, "DOCTEXT_STORAGE_DIR"),
        ({"DOCTEXT_PDF_BACKEND": "pdfjs"}, "DOCTEXT_PDF_BACKEND"),
        ({"DOCTEXT_MAX_UPLOAD_BYTES": "0"}, "DOCTEXT_MAX_UPLOAD_BYTES"),
        ({"DOCTEXT_MAX_UPLOAD_BYTES": "ten"}, "DOCTEXT_MAX_UPLOAD_BYTES"),
        ({"DOCTEXT_LOG_LEVEL": "chatty"}, "DOCTEXT_LOG_LEVEL"),
    ],
)
def test_invalid_settings_fail_fast(environ: dict[str, str], variable: str) -> None:
    with pytest.raises(ValueError, match=variable):
        DoctextSettings.from_env(environ)
