"""Document storage collaborator: SQLite rows and a local blob directory."""

from .errors import DocumentNotFound, StorageError
from .repository import (
    STATUS_ERROR,
    STATUS_PROCESSED,
    STATUS_UPLOADED,
    DocumentRecord,
    DocumentRepository,
    StoredDocument,
    safe_name,
)

__all__ = [
    "DocumentNotFound",
    "DocumentRecord",
    "DocumentRepository",
    "STATUS_ERROR",
    "STATUS_PROCESSED",
    "STATUS_UPLOADED",
    "StorageError",
    "StoredDocument",
    "safe_name",
]
