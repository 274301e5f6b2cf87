"""Plain-text rendering of grouped spans.

Spans on a line are concatenated; a single space is inserted only when
two neighbours sit visibly apart and neither already carries whitespace
at the seam.  Lines end with a newline and blocks are separated by a
blank line.

:class:`TextStream` is lazy and restartable: every iteration walks the
groups again and yields small chunks, so a page never has to be joined
into one string unless the caller asks for it (:func:`render_text`).
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence, Union

from .config import GroupingConfig
from .models import Block, Line, Span

Renderable = Union[Block, Line]


def needs_space(left: Span, right: Span, cfg: GroupingConfig) -> bool:
    """True when a space should separate two adjacent spans on a line."""
    if not left.text or not right.text:
        return False
    if left.text[-1].isspace() or right.text[0].isspace():
        return False
    gap = right.x - left.right()
    return gap > cfg.space_gap_ratio * abs(left.font_size)


def iter_line(line: Line, cfg: GroupingConfig) -> Iterator[str]:
    """Yield the chunks of one line, newline included."""
    prev: Optional[Span] = None
    for sp in line.spans:
        if prev is not None and needs_space(prev, sp, cfg):
            yield " "
        yield sp.text
        prev = sp
    yield "\n"


def iter_block(block: Block, cfg: GroupingConfig) -> Iterator[str]:
    """Yield the chunks of every line in *block*."""
    for ln in block.lines:
        yield from iter_line(ln, cfg)


class TextStream:
    """Restartable iterable of text chunks over blocks or lines."""

    def __init__(
        self,
        items: Sequence[Renderable],
        cfg: Optional[GroupingConfig] = None,
    ) -> None:
        self.items = items
        self.cfg = cfg or GroupingConfig()

    def __iter__(self) -> Iterator[str]:
        prev_was_block = False
        for item in self.items:
            if isinstance(item, Block):
                if prev_was_block:
                    yield "\n"
                yield from iter_block(item, self.cfg)
                prev_was_block = True
            else:
                yield from iter_line(item, self.cfg)
                prev_was_block = False

    def text(self) -> str:
        """Materialise the whole stream."""
        return "".join(self)


def render_text(
    items: Sequence[Renderable], cfg: Optional[GroupingConfig] = None
) -> str:
    """Render blocks or lines to a single string."""
    return TextStream(items, cfg).text()
