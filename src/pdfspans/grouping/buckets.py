"""Row / column bucketing for tabular-style reconstruction.

Spans are keyed by ``floor(coord / quantum) * quantum``, so a coordinate
sitting exactly on a boundary lands in the bucket that starts there and
never in the one below it.  Coordinates are PDF user space (y grows up):
rows are returned top of page first, columns left to right.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from ..config import GroupingConfig
from ..models import Bucket, Span


def quantize(value: float, quantum: float) -> float:
    """Floor *value* onto a grid of step *quantum*."""
    return math.floor(value / quantum) * quantum


def _bucketize(
    spans: Sequence[Span], axis: str, quantum: float
) -> Dict[float, List[Span]]:
    buckets: Dict[float, List[Span]] = {}
    for sp in spans:
        coord = sp.y if axis == "row" else sp.x
        buckets.setdefault(quantize(coord, quantum), []).append(sp)
    return buckets


def group_rows(
    spans: Sequence[Span],
    quantum: Optional[float] = None,
    cfg: Optional[GroupingConfig] = None,
) -> List[Bucket]:
    """Bucket spans by quantised baseline y.

    Rows are ordered top-down (descending key); spans inside a row are
    ordered by x.  *quantum* defaults to ``cfg.row_quantum``.
    """
    if quantum is None:
        quantum = (cfg or GroupingConfig()).row_quantum
    if quantum <= 0:
        raise ValueError(f"quantum={quantum} must be > 0")

    buckets = _bucketize(spans, "row", quantum)
    return [
        Bucket(
            axis="row",
            key=key,
            spans=tuple(sorted(buckets[key], key=lambda s: s.x)),
        )
        for key in sorted(buckets, reverse=True)
    ]


def group_columns(
    spans: Sequence[Span],
    quantum: Optional[float] = None,
    cfg: Optional[GroupingConfig] = None,
) -> List[Bucket]:
    """Bucket spans by quantised left edge x.

    Columns are ordered left to right (ascending key); spans inside a
    column are ordered top-down.  *quantum* defaults to
    ``cfg.column_quantum``.
    """
    if quantum is None:
        quantum = (cfg or GroupingConfig()).column_quantum
    if quantum <= 0:
        raise ValueError(f"quantum={quantum} must be > 0")

    buckets = _bucketize(spans, "column", quantum)
    return [
        Bucket(
            axis="column",
            key=key,
            spans=tuple(sorted(buckets[key], key=lambda s: -s.y)),
        )
        for key in sorted(buckets)
    ]
