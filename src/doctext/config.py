"""Runtime configuration for extraction, storage and the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping

from doctext.extraction.adapters import DEFAULT_PDF_BACKEND, PDF_BACKENDS, PdfExtractorConfig


DEFAULT_DB_PATH = ".doctext.db"
DEFAULT_STORAGE_DIR = ".doctext-storage"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class DoctextSettings:
    """Validated runtime settings."""

    db_path: Path = Path(DEFAULT_DB_PATH)
    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)
    pdf_backend: str = DEFAULT_PDF_BACKEND
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def pdf_config(self) -> PdfExtractorConfig:
        return PdfExtractorConfig(backend=self.pdf_backend)

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DoctextSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        db_path_raw = source.get("DOCTEXT_DB_PATH", DEFAULT_DB_PATH).strip()
        storage_dir_raw = source.get("DOCTEXT_STORAGE_DIR", DEFAULT_STORAGE_DIR).strip()
        pdf_backend = source.get("DOCTEXT_PDF_BACKEND", DEFAULT_PDF_BACKEND).strip().lower()
        max_upload_raw = source.get("DOCTEXT_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)).strip()
        log_level = source.get("DOCTEXT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()

        if not db_path_raw:
            raise ValueError("DOCTEXT_DB_PATH cannot be empty")
        if not storage_dir_raw:
            raise ValueError("DOCTEXT_STORAGE_DIR cannot be empty")
        if pdf_backend not in PDF_BACKENDS:
            supported = ", ".join(PDF_BACKENDS)
            raise ValueError(f"DOCTEXT_PDF_BACKEND must be one of: {supported}")
        if not max_upload_raw:
            raise ValueError("DOCTEXT_MAX_UPLOAD_BYTES cannot be empty")
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"DOCTEXT_LOG_LEVEL must be one of: {', '.join(_LOG_LEVELS)}")

        max_upload_bytes = _parse_positive_int(
            name="DOCTEXT_MAX_UPLOAD_BYTES",
            raw_value=max_upload_raw,
            minimum=1,
        )

        return cls(
            db_path=Path(db_path_raw),
            storage_dir=Path(storage_dir_raw),
            pdf_backend=pdf_backend,
            max_upload_bytes=max_upload_bytes,
            log_level=log_level,
        )
