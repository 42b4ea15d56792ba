"""Storage-layer failures surfaced to the request handlers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class StorageError(Exception):
    """Row or blob storage could not complete an operation."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class DocumentNotFound(StorageError):
    doc_id: str = ""

    def __str__(self) -> str:
        return f"{self.message} (doc_id={self.doc_id})"
