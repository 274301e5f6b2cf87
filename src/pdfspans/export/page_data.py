"""Serialization helpers for the per-page pipeline output.

``serialize_page`` converts the in-memory output of the grouping stage
into a JSON-friendly dict; ``deserialize_page`` reconstructs the spans
and blocks from that dict.

JSON layout
-----------
::

    {
      "version": 1,
      "page": 2,
      "page_width": 612.0,
      "page_height": 792.0,
      "spans": [ {Span.to_dict()}, ... ],
      "blocks": [ {Block.to_dict()}, ... ]
    }
"""

from __future__ import annotations

from typing import Any

from pdfspans.models import Block, Span

FORMAT_VERSION = 1

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def serialize_page(
    page: int,
    page_width: float,
    page_height: float,
    spans: list[Span],
    blocks: list[Block],
) -> dict[str, Any]:
    """Serialize a single page's grouping output to a JSON-friendly dict."""
    return {
        "version": FORMAT_VERSION,
        "page": page,
        "page_width": round(page_width, 3),
        "page_height": round(page_height, 3),
        "spans": [sp.to_dict() for sp in spans],
        "blocks": [b.to_dict() for b in blocks],
    }


def deserialize_page(
    data: dict[str, Any],
) -> tuple[list[Span], list[Block], float, float]:
    """Deserialize a page extraction JSON dict.

    Returns
    -------
    spans : list[Span]
    blocks : list[Block]
    page_width : float
    page_height : float

    Raises
    ------
    ValueError
        When the dict was written by an unknown format version.
    """
    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported page data version: {version!r}")
    spans = [Span.from_dict(s) for s in data.get("spans", [])]
    blocks = [Block.from_dict(b) for b in data.get("blocks", [])]
    return spans, blocks, data.get("page_width", 0.0), data.get("page_height", 0.0)
