from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional

from ..config import MergeOptions
from ..fonts import FontMetrics, lookup_font
from ..merge import can_merge
from ..models import Span, TextRun

logger = logging.getLogger(__name__)


def build_spans(
    runs: Iterable[TextRun],
    fonts: Mapping[str, FontMetrics],
    options: Optional[MergeOptions] = None,
    log: Optional[logging.Logger] = None,
) -> List[Span]:
    """Fold a page's runs into spans in a single left-to-right pass.

    Each run either extends the open span (when :func:`can_merge` holds
    against the last run absorbed into it) or closes that span and opens
    a new one.  Texts are concatenated without a separator; the merge
    decision already certified the gap as sub-word-boundary.

    Runs with empty text are dropped.  Output order follows input order.

    Args:
        runs: Runs in content-stream emission order.
        fonts: Font handles keyed by font identifier.
        options: Merge tolerances; ``None`` uses the module default.
        log: Diagnostics sink passed through to :func:`can_merge`.

    Returns:
        List of Span objects.

    Raises:
        UnknownFontError: A run references a font missing from *fonts*.
    """
    if log is None:
        log = logger

    spans: List[Span] = []
    current: Optional[Span] = None
    last_run: Optional[TextRun] = None
    dropped = 0
    total = 0

    for run in runs:
        total += 1
        font = lookup_font(fonts, run.font)
        if not run.text:
            dropped += 1
            continue

        if (
            current is not None
            and last_run is not None
            and can_merge(
                last_run,
                run,
                font,
                run.char_spacing,
                run.word_spacing,
                options,
                log,
            )
        ):
            current = current.absorb(run)
        else:
            if current is not None:
                spans.append(current)
            current = Span.from_run(run)
        last_run = run

    if current is not None:
        spans.append(current)

    log.debug(
        "build_spans: %d runs -> %d spans (%d empty dropped)",
        total,
        len(spans),
        dropped,
    )
    return spans
