"""CLI command storing a local file as an uploaded document."""

from __future__ import annotations

import argparse
import base64
import json
import logging
import mimetypes
from pathlib import Path

from dotenv import load_dotenv

from doctext.config import DoctextSettings
from doctext.service.handlers import ServiceResponse, UploadHandler
from doctext.storage.errors import StorageError
from doctext.storage.repository import DocumentRepository


load_dotenv()

LOGGER = logging.getLogger(__name__)

DEFAULT_MIME = "application/octet-stream"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upload a document for later text extraction")
    parser.add_argument("--path", required=True, help="File to upload")
    parser.add_argument("--mime", default=None, help="MIME type (guessed from the filename by default)")
    parser.add_argument("--db-path", default=None, help="Override DOCTEXT_DB_PATH")
    parser.add_argument("--storage-dir", default=None, help="Override DOCTEXT_STORAGE_DIR")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = DoctextSettings.from_env()
    except ValueError as exc:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
        LOGGER.error("Invalid configuration: %s", exc)
        return 2
    logging.basicConfig(level=settings.logging_level, format="%(asctime)s %(levelname)s %(message)s")

    source = Path(args.path)
    try:
        payload = source.read_bytes()
    except OSError as exc:
        LOGGER.error("Failed to read %s: %s", source, exc)
        return 2

    mime = args.mime or mimetypes.guess_type(source.name)[0] or DEFAULT_MIME
    request = {
        "filename": source.name,
        "mime": mime,
        "size": len(payload),
        "contentBase64": base64.b64encode(payload).decode("ascii"),
    }

    db_path = Path(args.db_path) if args.db_path else settings.db_path
    storage_dir = Path(args.storage_dir) if args.storage_dir else settings.storage_dir
    try:
        with DocumentRepository(db_path, storage_dir) as repository:
            response = UploadHandler(repository, max_upload_bytes=settings.max_upload_bytes).handle(request)
    except StorageError as exc:
        LOGGER.error("Storage unavailable at %s: %s", db_path, exc)
        response = ServiceResponse(status_code=500, body={"error": str(exc)})

    print(json.dumps({"status_code": response.status_code, **response.body}, ensure_ascii=True, indent=2))
    return 0 if response.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
