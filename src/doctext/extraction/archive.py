"""Read-only view over ZIP-structured payloads (DOCX, PPTX)."""

from __future__ import annotations

from io import BytesIO
from typing import Iterator
from zipfile import BadZipFile, ZipFile
import zlib

from doctext.extraction.errors import CorruptArchive, DecodeFailure, EntryMissing
from doctext.extraction.models import ArchiveEntry


class Archive:
    """Named entries of an in-memory ZIP container.

    Entries are only decompressed when read. Listing is always sorted
    lexicographically by path; callers derive ordinal numbering from it.
    """

    def __init__(self, zip_file: ZipFile) -> None:
        self._zip = zip_file
        self._names = frozenset(zip_file.namelist())

    @classmethod
    def open(cls, payload: bytes) -> "Archive":
        try:
            return cls(ZipFile(BytesIO(payload), "r"))
        except (BadZipFile, ValueError, OSError) as exc:
            raise CorruptArchive(f"Not a readable ZIP container: {exc}") from exc

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def has_entry(self, path: str) -> bool:
        return path in self._names

    def list_entries(self, prefix: str = "", suffix: str = "") -> list[str]:
        """Return member paths under ``prefix`` ending with ``suffix``, sorted."""

        return sorted(
            name
            for name in self._names
            if not name.endswith("/") and name.startswith(prefix) and name.endswith(suffix)
        )

    def iter_entries(self, prefix: str = "", suffix: str = "") -> Iterator[ArchiveEntry]:
        for path in self.list_entries(prefix, suffix):
            yield ArchiveEntry(path=path, payload=self.read_bytes(path))

    def read_bytes(self, path: str) -> bytes:
        if path not in self._names:
            raise EntryMissing("Archive entry not found", path=path)
        try:
            return self._zip.read(path)
        except (BadZipFile, zlib.error, NotImplementedError, RuntimeError, EOFError, OSError) as exc:
            raise CorruptArchive(f"Cannot decompress entry {path}: {exc}") from exc

    def read_text(self, path: str) -> str:
        raw = self.read_bytes(path)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeFailure(f"Entry {path} is not valid UTF-8: {exc}") from exc
