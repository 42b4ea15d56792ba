"""SQLite rows plus a blob directory acting as the document store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import re
import sqlite3
import time
import uuid

from doctext.extraction.models import SourceDocument
from doctext.storage.errors import DocumentNotFound, StorageError
from doctext.storage.schema import apply_runtime_pragmas, ensure_schema

logger = logging.getLogger(__name__)

STATUS_UPLOADED = "uploaded"
STATUS_PROCESSED = "processed"
STATUS_ERROR = "error"
RESULT_STATUSES = frozenset({STATUS_PROCESSED, STATUS_ERROR})

BLOB_PREFIX = "raw"
MAX_SAFE_NAME_LENGTH = 180
_UNSAFE_NAME_RE = re.compile(r"[^\w.\-]+", re.ASCII)


def safe_name(name: str) -> str:
    """Replace path separators and other unsafe runs with ``-``."""

    return _UNSAFE_NAME_RE.sub("-", name)[:MAX_SAFE_NAME_LENGTH]


@dataclass(slots=True)
class DocumentRecord:
    id: str
    filename: str
    mime: str
    size_bytes: int
    storage_path: str
    status: str
    extracted_text: str | None
    created_at: str
    updated_at: str


@dataclass(slots=True)
class StoredDocument:
    """A stored row together with its blob, ready for extraction."""

    record: DocumentRecord
    source: SourceDocument


class DocumentRepository:
    """Storage facade for uploaded documents and their extraction results."""

    def __init__(self, db_path: str | Path, storage_dir: str | Path) -> None:
        self._db_path = Path(db_path)
        self._storage_dir = Path(storage_dir)
        connection: sqlite3.Connection | None = None
        try:
            connection = sqlite3.connect(str(self._db_path))
            connection.row_factory = sqlite3.Row
            apply_runtime_pragmas(connection)
            ensure_schema(connection)
        except sqlite3.Error as exc:
            if connection is not None:
                connection.close()
            raise StorageError(f"DB open failed: {exc}") from exc
        self._connection = connection

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "DocumentRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def create_document(
        self,
        *,
        filename: str,
        mime: str,
        payload: bytes,
        size_bytes: int | None = None,
    ) -> DocumentRecord:
        """Write the blob, then insert its row with status ``uploaded``."""

        doc_id = str(uuid.uuid4())
        storage_path = f"{BLOB_PREFIX}/{int(time.time() * 1000)}-{safe_name(filename)}"
        blob_path = self._storage_dir / storage_path

        try:
            blob_path.parent.mkdir(parents=True, exist_ok=True)
            with blob_path.open("xb") as handle:
                handle.write(payload)
        except FileExistsError as exc:
            raise StorageError(f"Storage upload failed: {storage_path} already exists") from exc
        except OSError as exc:
            raise StorageError(f"Storage upload failed: {exc}") from exc

        try:
            with self._connection:
                self._connection.execute(
                    """
                    INSERT INTO doc_files (id, filename, mime, size_bytes, storage_path, status)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        doc_id,
                        filename,
                        mime,
                        size_bytes if size_bytes is not None else len(payload),
                        storage_path,
                        STATUS_UPLOADED,
                    ),
                )
        except sqlite3.Error as exc:
            blob_path.unlink(missing_ok=True)
            raise StorageError(f"DB insert failed: {exc}") from exc

        logger.info("Stored document %s at %s (%d bytes)", doc_id, storage_path, len(payload))
        return self.get_document(doc_id)

    def get_document(self, doc_id: str) -> DocumentRecord:
        try:
            row = self._connection.execute(
                """
                SELECT id, filename, mime, size_bytes, storage_path, status,
                       extracted_text, created_at, updated_at
                FROM doc_files
                WHERE id = ?
                """,
                (doc_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"DB lookup failed: {exc}") from exc

        if row is None:
            raise DocumentNotFound("doc not found", doc_id=doc_id)
        return DocumentRecord(
            id=row["id"],
            filename=row["filename"],
            mime=row["mime"],
            size_bytes=int(row["size_bytes"]),
            storage_path=row["storage_path"],
            status=row["status"],
            extracted_text=row["extracted_text"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def fetch_document(self, doc_id: str) -> StoredDocument:
        """Load the row and the complete blob for ``doc_id``."""

        record = self.get_document(doc_id)
        try:
            payload = (self._storage_dir / record.storage_path).read_bytes()
        except OSError as exc:
            raise StorageError(f"storage download failed: {exc}") from exc

        source = SourceDocument(payload=payload, filename=record.filename, mime_hint=record.mime)
        return StoredDocument(record=record, source=source)

    def persist_result(self, doc_id: str, text: str | None, status: str) -> None:
        if status not in RESULT_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(sorted(RESULT_STATUSES))}")

        try:
            with self._connection:
                cursor = self._connection.execute(
                    """
                    UPDATE doc_files
                    SET extracted_text = ?, status = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (text, status, doc_id),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"DB update failed: {exc}") from exc

        if cursor.rowcount == 0:
            raise StorageError(f"DB update failed: no row for doc_id={doc_id}")
