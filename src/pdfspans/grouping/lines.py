from __future__ import annotations

from typing import List, Optional, Sequence

from ..config import DEFAULT_MERGE_OPTIONS, GroupingConfig, MergeOptions
from ..models import Block, Line, Span, dominant_size

# =============================================================================
# Line layer: build_lines
# =============================================================================


def _make_line(spans: List[Span], baseline: float) -> Line:
    return Line(page=spans[0].page, baseline_y=baseline, spans=tuple(spans))


def build_lines(
    spans: Sequence[Span], options: Optional[MergeOptions] = None
) -> List[Line]:
    """Group spans (already in reading order) into lines by baseline.

    A span joins the open line when its baseline lies within
    ``options.baseline_tolerance`` of the line's baseline and it starts to
    the right of the previous span.  Anything else closes the line.  The
    line's baseline is that of its first span.

    Args:
        spans: Spans from build_spans()
        options: MergeOptions providing baseline_tolerance

    Returns:
        List of Line objects in input order
    """
    if options is None:
        options = DEFAULT_MERGE_OPTIONS
    if not spans:
        return []

    lines: List[Line] = []
    current: List[Span] = [spans[0]]
    baseline = spans[0].y

    for sp in spans[1:]:
        same_baseline = abs(sp.y - baseline) <= options.baseline_tolerance
        if same_baseline and sp.x > current[-1].x:
            current.append(sp)
            continue
        lines.append(_make_line(current, baseline))
        current = [sp]
        baseline = sp.y

    lines.append(_make_line(current, baseline))
    return lines


# =============================================================================
# Block layer: build_blocks
# =============================================================================


def build_blocks(
    lines: Sequence[Line], cfg: Optional[GroupingConfig] = None
) -> List[Block]:
    """Group consecutive lines into paragraph-like blocks.

    Single pass, no backtracking.  A line continues the open block unless

    * the baseline distance to the previous line exceeds
      ``cfg.block_gap_mult`` times the block's dominant font size, or
    * its left edge moves by more than ``cfg.block_indent_mult`` times
      that size (a new column or a heading).

    The dominant font size is the character-weighted most common size of
    the spans already in the block.

    Args:
        lines: Lines from build_lines()
        cfg: GroupingConfig with block_gap_mult / block_indent_mult

    Returns:
        List of Block objects in input order
    """
    if cfg is None:
        cfg = GroupingConfig()
    if not lines:
        return []

    blocks: List[Block] = []
    current: List[Line] = [lines[0]]
    current_spans: List[Span] = list(lines[0].spans)

    for ln in lines[1:]:
        prev = current[-1]
        size = dominant_size(current_spans)
        v_gap = abs(prev.baseline_y - ln.baseline_y)
        x_shift = abs(ln.x0() - prev.x0())

        should_split = (
            v_gap > cfg.block_gap_mult * size
            or x_shift > cfg.block_indent_mult * size
        )
        if should_split:
            blocks.append(Block(page=current[0].page, lines=tuple(current)))
            current = [ln]
            current_spans = list(ln.spans)
        else:
            current.append(ln)
            current_spans.extend(ln.spans)

    blocks.append(Block(page=current[0].page, lines=tuple(current)))
    return blocks


def group_page(
    spans: Sequence[Span],
    options: Optional[MergeOptions] = None,
    cfg: Optional[GroupingConfig] = None,
) -> List[Block]:
    """Run build_lines() then build_blocks() over a page's spans."""
    return build_blocks(build_lines(spans, options), cfg)
