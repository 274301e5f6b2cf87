"""Merge decision engine: do two adjacent runs belong to one span?

The prediction is the advance a single inter-word space would occupy::

    expected_gap = space_width / 1000 * font_size + Tc + Tw

and two runs on the same baseline merge when the observed gap between
them does not exceed ``expected_gap * space_multiplier``.  The comparison
is inclusive because producers frequently round onto the threshold.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

from .config import DEFAULT_MERGE_OPTIONS, MergeOptions
from .fonts import FontMetrics, space_width
from .models import Span, TextRun

logger = logging.getLogger(__name__)

# Font sizes closer than this are considered equal.
FONT_SIZE_EPSILON = 1e-3

Positioned = Union[TextRun, Span]


def expected_gap(
    font: FontMetrics,
    font_size: float,
    char_spacing: float = 0.0,
    word_spacing: float = 0.0,
) -> float:
    """Horizontal advance predicted for one space, always finite and >= 0.

    A non-positive or non-finite *font_size* is treated as one text-space
    unit, so the space glyph width still contributes.
    """
    if not math.isfinite(font_size) or font_size <= 0:
        font_size = 1.0
    gap = space_width(font) / 1000.0 * font_size
    if math.isfinite(char_spacing):
        gap += char_spacing
    if math.isfinite(word_spacing):
        gap += word_spacing
    return max(gap, 0.0)


def actual_gap(predecessor: Positioned, successor: Positioned) -> float:
    """Observed gap between the predecessor's right edge and the successor.

    Negative when the two overlap.
    """
    return successor.x - (predecessor.x + predecessor.w)


def can_merge(
    predecessor: Positioned,
    successor: Positioned,
    font: FontMetrics,
    char_spacing: float = 0.0,
    word_spacing: float = 0.0,
    options: Optional[MergeOptions] = None,
    log: Optional[logging.Logger] = None,
) -> bool:
    """Decide whether *successor* continues *predecessor* as one span.

    Assumes left-to-right, same-line adjacency; runs are never reordered.

    Parameters
    ----------
    predecessor, successor : TextRun or Span
        Candidate neighbours, in drawing order.
    font : FontMetrics
        Shared font of the two runs.
    char_spacing, word_spacing : float
        Tc / Tw in effect when the successor was drawn.
    options : MergeOptions, optional
        Tolerances; defaults to :data:`DEFAULT_MERGE_OPTIONS`.
    log : logging.Logger, optional
        Diagnostics sink; defaults to this module's logger.
    """
    if options is None:
        options = DEFAULT_MERGE_OPTIONS
    if log is None:
        log = logger

    if predecessor.font != successor.font:
        log.debug(
            "no merge %r|%r: font %s != %s",
            predecessor.text,
            successor.text,
            predecessor.font,
            successor.font,
        )
        return False
    if abs(predecessor.font_size - successor.font_size) > FONT_SIZE_EPSILON:
        log.debug(
            "no merge %r|%r: size %.3f != %.3f",
            predecessor.text,
            successor.text,
            predecessor.font_size,
            successor.font_size,
        )
        return False
    dy = abs(predecessor.y - successor.y)
    if dy > options.baseline_tolerance:
        log.debug(
            "no merge %r|%r: baseline delta %.3f > %.3f",
            predecessor.text,
            successor.text,
            dy,
            options.baseline_tolerance,
        )
        return False

    threshold = (
        expected_gap(font, predecessor.font_size, char_spacing, word_spacing)
        * options.space_multiplier
    )
    gap = actual_gap(predecessor, successor)
    if gap <= threshold:
        return True
    log.debug(
        "no merge %r|%r: gap %.3f > %.3f",
        predecessor.text,
        successor.text,
        gap,
        threshold,
    )
    return False
