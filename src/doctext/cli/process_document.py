"""CLI command running extraction for one stored document."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from doctext.config import DoctextSettings
from doctext.extraction.dispatcher import TextExtractionEngine
from doctext.service.handlers import ProcessHandler, ServiceResponse
from doctext.storage.errors import StorageError
from doctext.storage.repository import DocumentRepository


load_dotenv()

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract and persist text for an uploaded document")
    parser.add_argument("--doc-id", default="", help="Identifier returned by upload_document")
    parser.add_argument("--db-path", default=None, help="Override DOCTEXT_DB_PATH")
    parser.add_argument("--storage-dir", default=None, help="Override DOCTEXT_STORAGE_DIR")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = DoctextSettings.from_env()
        engine = TextExtractionEngine.with_pdf_backend(settings.pdf_backend)
    except ValueError as exc:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
        LOGGER.error("Invalid configuration: %s", exc)
        return 2
    logging.basicConfig(level=settings.logging_level, format="%(asctime)s %(levelname)s %(message)s")

    db_path = Path(args.db_path) if args.db_path else settings.db_path
    storage_dir = Path(args.storage_dir) if args.storage_dir else settings.storage_dir
    try:
        with DocumentRepository(db_path, storage_dir) as repository:
            response = ProcessHandler(repository, engine).handle({"doc_id": args.doc_id})
    except StorageError as exc:
        LOGGER.error("Storage unavailable at %s: %s", db_path, exc)
        response = ServiceResponse(status_code=500, body={"error": str(exc)})

    print(json.dumps({"status_code": response.status_code, **response.body}, ensure_ascii=True, indent=2))
    return 0 if response.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
