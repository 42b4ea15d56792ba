"""Request handlers wiring storage and extraction into HTTP-shaped replies."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
import logging
from typing import Any, Mapping

from doctext.extraction.dispatcher import TextExtractionEngine
from doctext.storage.errors import DocumentNotFound, StorageError
from doctext.storage.repository import STATUS_ERROR, STATUS_PROCESSED, DocumentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServiceResponse:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def _error(status_code: int, message: str) -> ServiceResponse:
    return ServiceResponse(status_code=status_code, body={"error": message})


def _format_limit(limit_bytes: int) -> str:
    mebibyte = 1024 * 1024
    if limit_bytes % mebibyte == 0:
        return f"{limit_bytes // mebibyte}MB"
    return f"{limit_bytes} bytes"


def _field(request: Mapping[str, Any] | None, name: str) -> Any:
    if not request:
        return None
    value = request.get(name)
    if isinstance(value, str) and not value.strip():
        return None
    return value


class UploadHandler:
    """Accept a base64 upload, store the blob and create its row."""

    def __init__(self, repository: DocumentRepository, *, max_upload_bytes: int) -> None:
        if max_upload_bytes < 1:
            raise ValueError("max_upload_bytes must be positive")
        self._repository = repository
        self._max_upload_bytes = max_upload_bytes

    def handle(self, request: Mapping[str, Any] | None) -> ServiceResponse:
        filename = _field(request, "filename")
        mime = _field(request, "mime")
        content = _field(request, "contentBase64")
        declared_size = _field(request, "size")

        if not filename or not mime or not content:
            return _error(400, "Missing required fields: filename, mime, contentBase64")

        too_large = f"File too large (max {_format_limit(self._max_upload_bytes)} for this endpoint)"
        if declared_size is not None:
            try:
                size = int(declared_size)
            except (TypeError, ValueError):
                return _error(400, "size must be an integer")
            if size > self._max_upload_bytes:
                return _error(413, too_large)
        else:
            size = None

        try:
            payload = base64.b64decode(str(content), validate=True)
        except (binascii.Error, ValueError):
            return _error(400, "contentBase64 is not valid base64")
        if len(payload) > self._max_upload_bytes:
            return _error(413, too_large)

        try:
            record = self._repository.create_document(
                filename=str(filename),
                mime=str(mime),
                payload=payload,
                size_bytes=size,
            )
        except StorageError as exc:
            logger.error("Upload of %s failed: %s", filename, exc)
            return _error(500, str(exc))

        return ServiceResponse(200, {"doc_id": record.id, "storage_path": record.storage_path})


class ProcessHandler:
    """Fetch a stored document, extract its text and persist the result."""

    def __init__(self, repository: DocumentRepository, engine: TextExtractionEngine) -> None:
        self._repository = repository
        self._engine = engine

    def handle(self, request: Mapping[str, Any] | None) -> ServiceResponse:
        doc_id = _field(request, "doc_id")
        if not doc_id:
            return _error(400, "Missing doc_id")
        doc_id = str(doc_id)

        try:
            stored = self._repository.fetch_document(doc_id)
        except DocumentNotFound as exc:
            return _error(404, str(exc))
        except StorageError as exc:
            logger.error("Fetching %s failed: %s", doc_id, exc)
            return _error(500, str(exc))

        outcome = self._engine.extract(stored.source)
        status = STATUS_PROCESSED if outcome.succeeded else STATUS_ERROR

        try:
            self._repository.persist_result(doc_id, outcome.text or None, status)
        except StorageError as exc:
            logger.error("Persisting result for %s failed: %s", doc_id, exc)
            return _error(500, str(exc))

        logger.info(
            "Processed %s as %s: status=%s, %d chars",
            doc_id,
            outcome.format_kind.value,
            status,
            len(outcome.text),
        )
        return ServiceResponse(
            200,
            {"doc_id": doc_id, "status": status, "extracted_text_length": len(outcome.text)},
        )
