"""Ingest stage — PDF validation, document metadata, and positioned runs.

Centralises PDF opening so that downstream stages and the CLI never call
``pdfplumber.open()`` directly.  This module is the adapter between a
real document object model (pdfplumber / pdfminer) and the core, which
only sees :class:`~pdfspans.models.TextRun` values and
:class:`~pdfspans.fonts.FontMetrics` handles.

Public API
----------
- :func:`ingest_pdf` — open + validate a PDF, return a :class:`PdfMeta`
- :func:`extract_page_runs` — runs + fonts for one page as :class:`PageRuns`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pdfplumber

from ..fonts import FontMetrics
from ..models import TextRun
from .device import collect_page_runs

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------


@dataclass
class PageInfo:
    """Dimension metadata for a single PDF page."""

    index: int  # zero-based page number
    width: float  # points
    height: float  # points


@dataclass
class PdfMeta:
    """PDF-level metadata returned by :func:`ingest_pdf`.

    This is a lightweight descriptor; it does **not** hold the
    ``pdfplumber.PDF`` handle open.
    """

    path: Path
    num_pages: int
    pages: List[PageInfo] = field(default_factory=list)
    file_size_bytes: int = 0
    pdf_metadata: Dict[str, str] = field(default_factory=dict)  # PDF info dict

    def page(self, index: int) -> PageInfo:
        """Return :class:`PageInfo` for *index* (zero-based)."""
        return self.pages[index]


@dataclass
class PageRuns:
    """Everything the core needs for one page."""

    page: int
    width: float
    height: float
    runs: List[TextRun] = field(default_factory=list)
    fonts: Dict[str, FontMetrics] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


class IngestError(Exception):
    """Raised when a PDF cannot be ingested."""


def _validate_pdf_path(pdf_path: Path) -> None:
    """Raise :class:`IngestError` for missing / empty / wrong-extension files."""
    if not pdf_path.exists():
        raise IngestError(f"File not found: {pdf_path}")
    if not pdf_path.is_file():
        raise IngestError(f"Not a file: {pdf_path}")
    if pdf_path.stat().st_size == 0:
        raise IngestError(f"Empty file: {pdf_path}")
    if pdf_path.suffix.lower() != ".pdf":
        raise IngestError(f"Not a PDF (suffix={pdf_path.suffix!r}): {pdf_path}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def ingest_pdf(pdf_path: Path | str) -> PdfMeta:
    """Open and validate a PDF, returning a :class:`PdfMeta` descriptor.

    Raises
    ------
    IngestError
        When the file is missing, empty, or cannot be opened as a PDF.
    """
    pdf_path = Path(pdf_path)
    _validate_pdf_path(pdf_path)

    try:
        with pdfplumber.open(pdf_path) as pdf:
            pages = [
                PageInfo(index=i, width=float(pg.width), height=float(pg.height))
                for i, pg in enumerate(pdf.pages)
            ]
            raw_meta = pdf.metadata or {}
            pdf_metadata = {}
            for k, v in raw_meta.items():
                if isinstance(v, bytes):
                    v = v.decode("utf-8", errors="replace")
                pdf_metadata[str(k)] = str(v) if v is not None else ""
    except Exception as exc:
        raise IngestError(f"Cannot open PDF: {exc}") from exc

    file_size = pdf_path.stat().st_size
    log.info(
        "Ingested %s: %d pages, %.1f KB",
        pdf_path.name,
        len(pages),
        file_size / 1024,
    )
    return PdfMeta(
        path=pdf_path.resolve(),
        num_pages=len(pages),
        pages=pages,
        file_size_bytes=file_size,
        pdf_metadata=pdf_metadata,
    )


def extract_page_runs(pdf_path: Path | str, page_num: int) -> PageRuns:
    """Extract positioned runs and their fonts for one page.

    The page is replayed through :class:`~pdfspans.ingest.device.RunCollector`,
    so every run carries the character and word spacing in effect when it
    was drawn, and every font a run references has a handle.

    Parameters
    ----------
    pdf_path : Path or str
        Path to the PDF.
    page_num : int
        Zero-based page index.

    Raises
    ------
    IngestError
        When the file is invalid, *page_num* is out of range, or the page
        content cannot be interpreted.
    """
    pdf_path = Path(pdf_path)
    _validate_pdf_path(pdf_path)

    try:
        with pdfplumber.open(pdf_path) as pdf:
            if not 0 <= page_num < len(pdf.pages):
                raise IngestError(
                    f"Page {page_num} out of range (document has {len(pdf.pages)})"
                )
            page = pdf.pages[page_num]
            device = collect_page_runs(page.page_obj, page_num)
            result = PageRuns(
                page=page_num,
                width=float(page.width),
                height=float(page.height),
                runs=device.runs,
                fonts=dict(device.fonts),
            )
    except IngestError:
        raise
    except Exception as exc:
        raise IngestError(f"Cannot read page {page_num}: {exc}") from exc

    log.debug(
        "Page %d: %d runs, %d fonts", page_num, len(result.runs), len(result.fonts)
    )
    return result
