"""Span, line and block reconstruction from positioned PDF text runs.

Frequently-used symbols are re-exported here for convenience.
For specialised imports (ingest adapters, JSON export, bucketing
internals, etc.) import directly from the relevant submodule, e.g.::

    from pdfspans.ingest import extract_page_runs
    from pdfspans.export import serialize_page
"""

# ── Core models & config ──────────────────────────────────────────────

from .config import (
    DEFAULT_MERGE_OPTIONS,
    ConfigValidationError,
    GroupingConfig,
    MergeOptions,
)
from .fonts import (
    FALLBACK_GLYPH_WIDTH,
    FontMetrics,
    UnknownFontError,
    WidthTableFont,
    lookup_font,
    space_width,
    width_of,
)
from .models import Block, Bucket, Line, Span, TextRun

# ── Merging & grouping ────────────────────────────────────────────────

from .merge import actual_gap, can_merge, expected_gap
from .grouping import (
    build_blocks,
    build_lines,
    build_spans,
    group_columns,
    group_page,
    group_rows,
)

# ── Rendering ─────────────────────────────────────────────────────────

from .render import TextStream, render_text

# ── Pipeline ──────────────────────────────────────────────────────────

from .pipeline import (
    DocumentResult,
    PageResult,
    StageResult,
    run_document,
    run_page,
    run_pdf_page,
)

__all__ = [
    # Models & config
    "DEFAULT_MERGE_OPTIONS",
    "ConfigValidationError",
    "GroupingConfig",
    "MergeOptions",
    "TextRun",
    "Span",
    "Line",
    "Block",
    "Bucket",
    # Fonts
    "FALLBACK_GLYPH_WIDTH",
    "FontMetrics",
    "UnknownFontError",
    "WidthTableFont",
    "lookup_font",
    "space_width",
    "width_of",
    # Merging & grouping
    "actual_gap",
    "can_merge",
    "expected_gap",
    "build_spans",
    "build_lines",
    "build_blocks",
    "group_page",
    "group_rows",
    "group_columns",
    # Rendering
    "TextStream",
    "render_text",
    # Pipeline
    "DocumentResult",
    "PageResult",
    "StageResult",
    "run_document",
    "run_page",
    "run_pdf_page",
]
