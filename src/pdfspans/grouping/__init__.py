"""Grouping stage — runs → spans → lines → blocks, plus row/column buckets.

Public API
----------
- :func:`build_spans` — fold positioned runs into spans
- :func:`build_lines` — group spans sharing a baseline
- :func:`build_blocks` — group consecutive lines into blocks
- :func:`group_page` — ``build_lines`` + ``build_blocks``
- :func:`group_rows` / :func:`group_columns` — quantised buckets
"""

from .buckets import group_columns, group_rows, quantize
from .lines import build_blocks, build_lines, group_page
from .spans import build_spans

__all__ = [
    "build_spans",
    "build_lines",
    "build_blocks",
    "group_page",
    "group_rows",
    "group_columns",
    "quantize",
]
