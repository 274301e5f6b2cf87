"""Pipeline stage infrastructure: timing, stage-result recording, orchestration.

Canonical per-page flow::

    ingest → spans → lines → blocks

Every stage produces a :class:`StageResult` (status, timing, counts) so
runners and the CLI can report what happened on each page.

:func:`run_page` works on in-memory runs and performs no file I/O.
:func:`run_pdf_page` prepends the ``ingest`` stage, and
:func:`run_document` fans pages out over a thread pool; pages share no
mutable state, and font handles are read-only.
"""

from __future__ import annotations

import logging
import time
import traceback
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Mapping, Optional

from .config import GroupingConfig, MergeOptions
from .fonts import FontMetrics
from .grouping import build_blocks, build_lines, build_spans, group_columns, group_rows
from .models import Block, Bucket, Line, Span, TextRun
from .render import TextStream

logger = logging.getLogger("pdfspans.pipeline")

# Canonical per-page stage sequence.
STAGE_ORDER: List[str] = ["ingest", "spans", "lines", "blocks"]

# Separator between page texts in a document rendering.
PAGE_SEPARATOR = "\f"


# ── Stage result ───────────────────────────────────────────────────────


@dataclass
class StageResult:
    """Outcome record for a single pipeline stage."""

    stage: str
    ran: bool = False
    status: str = "skipped"  # "success" | "skipped" | "failed"
    duration_ms: int = 0
    counts: Dict[str, Any] = field(default_factory=dict)
    error: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize stage result to a JSON-compatible dict."""
        d: Dict[str, Any] = {
            "stage": self.stage,
            "ran": self.ran,
            "status": self.status,
            "duration_ms": self.duration_ms,
        }
        if self.counts:
            d["counts"] = self.counts
        if self.error is not None:
            d["error"] = self.error
        return d


@contextmanager
def run_stage(stage: str) -> Generator[StageResult, None, None]:
    """Context manager that wraps a pipeline stage with timing.

    Usage::

        with run_stage("spans") as sr:
            spans = build_spans(...)
            sr.counts["spans"] = len(spans)

    Status becomes ``"success"`` unless the body raises, in which case it
    is ``"failed"``, the error is recorded and the exception re-raised.
    """
    sr = StageResult(stage=stage, ran=True)
    t0 = time.perf_counter()
    try:
        yield sr
        if sr.status not in ("success", "failed"):
            sr.status = "success"
    except Exception as exc:
        sr.status = "failed"
        sr.error = {
            "type": type(exc).__name__,
            "message": str(exc),
            "stack": traceback.format_exc(),
        }
        # Re-raise so the outer handler can decide fallback policy.
        raise
    finally:
        sr.duration_ms = int((time.perf_counter() - t0) * 1000)


# ── Page-level result container ────────────────────────────────────────


@dataclass
class PageResult:
    """Structured result from :func:`run_page` for a single page."""

    page: int = 0
    page_width: float = 0.0
    page_height: float = 0.0
    stages: Dict[str, StageResult] = field(default_factory=dict)

    spans: List[Span] = field(default_factory=list)
    lines: List[Line] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)
    config: GroupingConfig = field(default_factory=GroupingConfig)

    def failed(self) -> bool:
        """True when any stage failed."""
        return any(sr.status == "failed" for sr in self.stages.values())

    def text_stream(self) -> TextStream:
        """Lazy, restartable plain-text stream over the page's blocks."""
        return TextStream(self.blocks, self.config)

    def text(self) -> str:
        """Plain text of the page."""
        return self.text_stream().text()

    def rows(self, quantum: Optional[float] = None) -> List[Bucket]:
        """Spans bucketed by quantised baseline, top of page first."""
        return group_rows(self.spans, quantum, self.config)

    def columns(self, quantum: Optional[float] = None) -> List[Bucket]:
        """Spans bucketed by quantised left edge, left to right."""
        return group_columns(self.spans, quantum, self.config)

    def to_summary_dict(self) -> Dict[str, Any]:
        """Return a lightweight summary suitable for JSON serialisation."""
        return {
            "page": self.page,
            "page_width": self.page_width,
            "page_height": self.page_height,
            "stages": {n: sr.to_dict() for n, sr in self.stages.items()},
            "counts": {
                "spans": len(self.spans),
                "lines": len(self.lines),
                "blocks": len(self.blocks),
            },
        }


def run_page(
    runs: Iterable[TextRun],
    fonts: Mapping[str, FontMetrics],
    page: int = 0,
    options: Optional[MergeOptions] = None,
    cfg: Optional[GroupingConfig] = None,
    log: Optional[logging.Logger] = None,
) -> PageResult:
    """Run spans → lines → blocks on one page of in-memory runs.

    Performs no file I/O.  *log* receives the per-decision diagnostics of
    the merge engine; it defaults to the pipeline logger.

    Raises
    ------
    UnknownFontError
        When a run references a font missing from *fonts*.
    """
    if cfg is None:
        cfg = GroupingConfig()
    if log is None:
        log = logger

    pr = PageResult(page=page, config=cfg)

    with run_stage("spans") as sr:
        pr.stages["spans"] = sr
        pr.spans = build_spans(runs, fonts, options, log)
        sr.counts = {"spans": len(pr.spans)}

    with run_stage("lines") as sr:
        pr.stages["lines"] = sr
        pr.lines = build_lines(pr.spans, options)
        sr.counts = {"lines": len(pr.lines)}

    with run_stage("blocks") as sr:
        pr.stages["blocks"] = sr
        pr.blocks = build_blocks(pr.lines, cfg)
        sr.counts = {"blocks": len(pr.blocks)}

    log.info(
        "run_page %d: %d spans, %d lines, %d blocks",
        page,
        len(pr.spans),
        len(pr.lines),
        len(pr.blocks),
    )
    return pr


def run_pdf_page(
    pdf_path: Path | str,
    page_num: int,
    options: Optional[MergeOptions] = None,
    cfg: Optional[GroupingConfig] = None,
    log: Optional[logging.Logger] = None,
) -> PageResult:
    """Ingest one PDF page with pdfplumber and run the pipeline on it."""
    from .ingest import extract_page_runs

    with run_stage("ingest") as sr_ing:
        page_runs = extract_page_runs(pdf_path, page_num)
        sr_ing.counts = {
            "runs": len(page_runs.runs),
            "fonts": len(page_runs.fonts),
        }

    pr = run_page(page_runs.runs, page_runs.fonts, page_num, options, cfg, log)
    pr.page_width = page_runs.width
    pr.page_height = page_runs.height
    stages = {"ingest": sr_ing, **pr.stages}
    pr.stages = {n: stages[n] for n in STAGE_ORDER if n in stages}
    return pr


# ── Document-level result ──────────────────────────────────────────────


@dataclass
class DocumentResult:
    """Aggregated result for a multi-page document run."""

    pdf_path: Optional[Path] = None
    pages: List[PageResult] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)  # PDF info dict

    def text(self) -> str:
        """Plain text of all pages, separated by form feeds."""
        return PAGE_SEPARATOR.join(pr.text() for pr in self.pages)

    def styled_spans(self) -> List[Span]:
        """Every span of the document in page order."""
        return [sp for pr in self.pages for sp in pr.spans]

    def failed_pages(self) -> List[int]:
        """Indices of pages whose pipeline failed."""
        return [pr.page for pr in self.pages if pr.failed()]

    def to_summary_dict(self) -> Dict[str, Any]:
        """Serialize document result to a summary dict."""
        return {
            "pdf": str(self.pdf_path) if self.pdf_path else None,
            "metadata": dict(self.metadata),
            "pages_processed": len(self.pages),
            "failed_pages": self.failed_pages(),
            "pages": [pr.to_summary_dict() for pr in self.pages],
        }


def _run_document_page(
    pdf_path: Path,
    page_num: int,
    options: Optional[MergeOptions],
    cfg: Optional[GroupingConfig],
    log: Optional[logging.Logger],
) -> PageResult:
    """Run one page; a failure yields a failed :class:`PageResult`."""
    try:
        return run_pdf_page(pdf_path, page_num, options, cfg, log)
    except Exception as exc:
        logger.error("run_document page %d failed: %s", page_num, exc)
        failed = PageResult(page=page_num)
        failed.stages["error"] = StageResult(
            stage="pipeline",
            ran=True,
            status="failed",
            error={"type": type(exc).__name__, "message": str(exc)},
        )
        return failed


def run_document(
    pdf_path: Path | str,
    pages: List[int] | None = None,
    options: Optional[MergeOptions] = None,
    cfg: Optional[GroupingConfig] = None,
    workers: int = 1,
    log: Optional[logging.Logger] = None,
) -> DocumentResult:
    """Process several pages of a PDF.

    A page that fails (unreadable, unknown font, ...) is recorded as a
    failed :class:`PageResult` and does not abort the other pages.

    Parameters
    ----------
    pdf_path : Path or str
        Path to the source PDF.
    pages : list[int], optional
        0-based page indices.  ``None`` = all pages.
    workers : int
        Number of worker threads; pages are independent.

    Raises
    ------
    IngestError
        When the document itself cannot be opened.
    """
    from .ingest import ingest_pdf

    pdf_path = Path(pdf_path)
    meta = ingest_pdf(pdf_path)
    if pages is None:
        pages = list(range(meta.num_pages))

    dr = DocumentResult(pdf_path=pdf_path, metadata=dict(meta.pdf_metadata))

    if workers > 1 and len(pages) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_run_document_page, pdf_path, pg, options, cfg, log)
                for pg in pages
            ]
            dr.pages = [fut.result() for fut in futures]
    else:
        dr.pages = [
            _run_document_page(pdf_path, pg, options, cfg, log) for pg in pages
        ]

    logger.info(
        "run_document: %d pages, %d failed",
        len(dr.pages),
        len(dr.failed_pages()),
    )
    return dr
