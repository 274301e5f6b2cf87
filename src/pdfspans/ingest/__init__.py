"""Ingest stage — PDF file validation, document metadata, and text runs.

Public API
----------
- :func:`ingest_pdf` — open + validate a PDF, return :class:`PdfMeta`
- :func:`extract_page_runs` — runs + fonts for one page
- :func:`collect_page_runs` — replay a pdfminer page through :class:`RunCollector`
- :class:`PdfMinerFont` — width lookup over a pdfminer font object
- :class:`PdfMeta` — PDF-level metadata container
- :class:`PageInfo` — per-page dimensions
- :class:`PageRuns` — per-page runs and fonts
- :class:`IngestError` — raised on validation failures
"""

from .device import PdfMinerFont, RunCollector, collect_page_runs
from .ingest import (
    IngestError,
    PageInfo,
    PageRuns,
    PdfMeta,
    extract_page_runs,
    ingest_pdf,
)

__all__ = [
    "IngestError",
    "PageInfo",
    "PageRuns",
    "PdfMeta",
    "PdfMinerFont",
    "RunCollector",
    "collect_page_runs",
    "extract_page_runs",
    "ingest_pdf",
]
