"""CLI command extracting text from local files without touching storage."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from doctext.config import DoctextSettings
from doctext.extraction.dispatcher import TextExtractionEngine
from doctext.extraction.models import SourceDocument


load_dotenv()

LOGGER = logging.getLogger(__name__)


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(path for path in target.rglob("*") if path.is_file())
    return []


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract plain text from PDF, DOCX, PPTX or text files")
    parser.add_argument("--path", required=True, help="Source file or directory")
    parser.add_argument("--mime", default="", help="MIME hint applied to every input")
    parser.add_argument("--pdf-backend", default=None, help="Override DOCTEXT_PDF_BACKEND")
    parser.add_argument("--include-text", action="store_true", help="Embed extracted text in the output")
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

    try:
        engine = TextExtractionEngine.with_pdf_backend(args.pdf_backend or settings.pdf_backend)
    except ValueError as exc:
        LOGGER.error("Invalid PDF backend: %s", exc)
        return 2

    source_path = Path(args.path)
    files = _collect_inputs(source_path)

    results: list[dict[str, object]] = []
    errors: list[dict[str, str]] = []
    if not files:
        errors.append({"source_path": str(source_path), "error": "No readable files at path"})

    for file_path in files:
        try:
            payload = file_path.read_bytes()
        except OSError as exc:
            errors.append({"source_path": str(file_path), "error": f"Failed to read source file: {exc}"})
            continue

        outcome = engine.extract(SourceDocument(payload=payload, filename=file_path.name, mime_hint=args.mime))
        entry: dict[str, object] = {
            "source_path": str(file_path),
            "format": outcome.format_kind.value,
            "succeeded": outcome.succeeded,
            "extracted_text_length": len(outcome.text),
            "error": outcome.error,
        }
        if args.include_text:
            entry["text"] = outcome.text
        results.append(entry)

    report = {
        "path": str(source_path),
        "processed": len(results),
        "results": results,
        "errors": errors,
    }
    print(json.dumps(report, ensure_ascii=True, indent=2))
    failed = errors or any(not result["succeeded"] for result in results)
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
