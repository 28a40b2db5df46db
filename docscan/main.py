"""Command-line entry point: run files through the extraction pipeline."""

import argparse
import json
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path

from docscan.config.settings import Settings
from docscan.documents.kinds import DocumentKind
from docscan.logging.logger import Log
from docscan.ocr.models import SUPPORTED_MIME_TYPES, Document
from docscan.processor.models import ProcessingFailure
from docscan.processor.processor import build_processor


def load_document(path: Path) -> Document:
    """Read a file into a Document, inferring the media type from its name.

    Raises:
        ValueError: if the file type is not supported.
    """
    mime_type, _ = mimetypes.guess_type(path.name)
    if path.suffix.lower() in (".heic", ".heif"):
        mime_type = f"image/{path.suffix.lower().lstrip('.')}"
    media_type = SUPPORTED_MIME_TYPES.get(mime_type or "")
    if media_type is None:
        raise ValueError(
            f"Unsupported file type for {path.name}. "
            f"Choose from: {sorted(SUPPORTED_MIME_TYPES)}"
        )
    return Document(
        content=path.read_bytes(),
        media_type=media_type,
        name=path.name,
        mime_type=mime_type,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docscan",
        description="Extract structured data from check and receipt scans.",
    )
    parser.add_argument(
        "--kind",
        choices=[kind.value for kind in DocumentKind],
        required=True,
        help="Document kind; selects the schema and hallucination checks.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Images or PDFs to process.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: settings -> logging -> processor -> batch -> JSON lines."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    documents = [load_document(path) for path in args.files]
    processor = build_processor(settings)
    outcomes = processor.run_batch(documents, args.kind)

    for outcome in outcomes:
        sys.stdout.write(json.dumps(outcome.to_dict(), default=str) + "\n")
    return 1 if any(isinstance(outcome, ProcessingFailure) for outcome in outcomes) else 0


if __name__ == "__main__":
    sys.exit(main())
