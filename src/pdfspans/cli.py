"""Command-line entry point: extract structured text from a PDF.

Usage:
    pdfspans document.pdf
    pdfspans document.pdf --pages 1 3 --format json
    pdfspans document.pdf --format rows --space-multiplier 2.0 -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigValidationError, GroupingConfig, MergeOptions
from .export import serialize_page
from .ingest import IngestError
from .pipeline import DocumentResult, run_document


def build_parser() -> argparse.ArgumentParser:
    defaults = MergeOptions()
    parser = argparse.ArgumentParser(
        prog="pdfspans",
        description="Reconstruct spans, lines and blocks of text from a PDF",
    )
    parser.add_argument("pdf", type=Path, help="PDF file to read")
    parser.add_argument(
        "--pages",
        type=int,
        nargs="+",
        default=None,
        help="Pages to process (1-indexed); default all",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json", "rows", "columns"],
        default="text",
        help="Output format",
    )
    parser.add_argument(
        "--baseline-tolerance",
        type=float,
        default=defaults.baseline_tolerance,
        help="Max baseline deviation for the same line (points)",
    )
    parser.add_argument(
        "--space-multiplier",
        type=float,
        default=defaults.space_multiplier,
        help="Multiplier on the expected space width before a span breaks",
    )
    parser.add_argument(
        "--workers", type=int, default=1, help="Worker threads for page processing"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="-v info, -vv debug"
    )
    return parser


def format_document(doc: DocumentResult, fmt: str) -> str:
    """Render a document result in one of the CLI output formats."""
    if fmt == "text":
        return doc.text()
    if fmt == "json":
        payload = {
            "pdf": str(doc.pdf_path) if doc.pdf_path else None,
            "metadata": doc.metadata,
            "pages": [
                serialize_page(
                    pr.page, pr.page_width, pr.page_height, pr.spans, pr.blocks
                )
                for pr in doc.pages
            ],
            "failed_pages": doc.failed_pages(),
        }
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

    out: List[str] = []
    for pr in doc.pages:
        buckets = pr.rows() if fmt == "rows" else pr.columns()
        for bucket in buckets:
            out.append(f"{pr.page + 1}\t{bucket.key:g}\t{bucket.text()}\n")
    return "".join(out)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        options = MergeOptions(
            baseline_tolerance=args.baseline_tolerance,
            space_multiplier=args.space_multiplier,
        )
    except ConfigValidationError as exc:
        print(f"pdfspans: {exc}", file=sys.stderr)
        return 2

    pages = [p - 1 for p in args.pages] if args.pages else None
    try:
        doc = run_document(
            args.pdf,
            pages=pages,
            options=options,
            cfg=GroupingConfig(),
            workers=max(1, args.workers),
        )
    except IngestError as exc:
        print(f"pdfspans: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(format_document(doc, args.format))
    return 1 if doc.failed_pages() else 0


if __name__ == "__main__":
    sys.exit(main())
