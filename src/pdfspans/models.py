from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from typing import List, Tuple


@dataclass(frozen=True)
class TextRun:
    """Atomic positioned glyph run as emitted by the content-stream interpreter."""

    text: str
    font: str
    font_size: float
    x: float
    y: float  # baseline
    w: float
    char_spacing: float = 0.0  # Tc in effect when drawn
    word_spacing: float = 0.0  # Tw in effect when drawn
    page: int = 0

    def right(self) -> float:
        """Right edge (``x + w``) in page units."""
        return self.x + self.w

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "text": self.text,
            "font": self.font,
            "font_size": round(self.font_size, 3),
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "w": round(self.w, 3),
            "char_spacing": self.char_spacing,
            "word_spacing": self.word_spacing,
            "page": self.page,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "TextRun":
        """Deserialize from a dict produced by :meth:`to_dict`."""
        return cls(
            text=d.get("text", ""),
            font=d["font"],
            font_size=d.get("font_size", 0.0),
            x=d["x"],
            y=d["y"],
            w=d.get("w", 0.0),
            char_spacing=d.get("char_spacing", 0.0),
            word_spacing=d.get("word_spacing", 0.0),
            page=d.get("page", 0),
        )


@dataclass(frozen=True)
class Span:
    """A merged, contiguous run of text with uniform font and size.

    Built from one :class:`TextRun` and extended by :meth:`absorb`, which
    returns a new value; a Span is never edited in place.
    """

    text: str
    font: str
    font_size: float
    x: float
    y: float
    w: float
    page: int = 0
    run_count: int = 1

    @classmethod
    def from_run(cls, run: TextRun) -> "Span":
        """Open a new span from a single run."""
        return cls(
            text=run.text,
            font=run.font,
            font_size=run.font_size,
            x=run.x,
            y=run.y,
            w=run.w,
            page=run.page,
        )

    def absorb(self, run: TextRun) -> "Span":
        """Return a copy of this span extended with *run*."""
        return replace(
            self,
            text=self.text + run.text,
            w=run.x + run.w - self.x,
            run_count=self.run_count + 1,
        )

    def right(self) -> float:
        """Right edge (``x + w``) in page units."""
        return self.x + self.w

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "text": self.text,
            "font": self.font,
            "font_size": round(self.font_size, 3),
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "w": round(self.w, 3),
            "page": self.page,
            "run_count": self.run_count,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Span":
        """Deserialize from a dict produced by :meth:`to_dict`."""
        return cls(
            text=d["text"],
            font=d["font"],
            font_size=d.get("font_size", 0.0),
            x=d["x"],
            y=d["y"],
            w=d.get("w", 0.0),
            page=d.get("page", 0),
            run_count=d.get("run_count", 1),
        )


def dominant_size(spans: List[Span]) -> float:
    """Most common font size, weighted by character count."""
    weights: Counter = Counter()
    for sp in spans:
        weights[sp.font_size] += len(sp.text)
    if not weights:
        return 0.0
    return weights.most_common(1)[0][0]


@dataclass(frozen=True)
class Line:
    """Spans sharing a baseline, strictly increasing in x."""

    page: int
    baseline_y: float
    spans: Tuple[Span, ...] = ()

    def x0(self) -> float:
        """Left edge of the first span."""
        return self.spans[0].x if self.spans else 0.0

    def x1(self) -> float:
        """Right-most edge over all spans."""
        return max((sp.right() for sp in self.spans), default=0.0)

    def text(self) -> str:
        """Span texts joined without separators."""
        return "".join(sp.text for sp in self.spans)

    def dominant_font_size(self) -> float:
        """Character-weighted most common font size on the line."""
        return dominant_size(list(self.spans))

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "page": self.page,
            "baseline_y": round(self.baseline_y, 3),
            "spans": [sp.to_dict() for sp in self.spans],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Line":
        """Deserialize from a dict produced by :meth:`to_dict`."""
        return cls(
            page=d.get("page", 0),
            baseline_y=d.get("baseline_y", 0.0),
            spans=tuple(Span.from_dict(s) for s in d.get("spans", [])),
        )


@dataclass(frozen=True)
class Block:
    """Consecutive lines judged to form one paragraph-like unit."""

    page: int
    lines: Tuple[Line, ...] = ()

    def spans(self) -> List[Span]:
        """All spans of the block in line order."""
        return [sp for ln in self.lines for sp in ln.spans]

    def dominant_font_size(self) -> float:
        """Character-weighted most common font size in the block."""
        return dominant_size(self.spans())

    def text(self) -> str:
        """Line texts joined by newlines."""
        return "\n".join(ln.text() for ln in self.lines)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "page": self.page,
            "text": self.text(),
            "lines": [ln.to_dict() for ln in self.lines],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Block":
        """Deserialize from a dict produced by :meth:`to_dict`."""
        return cls(
            page=d.get("page", 0),
            lines=tuple(Line.from_dict(ln) for ln in d.get("lines", [])),
        )


@dataclass(frozen=True)
class Bucket:
    """Spans sharing a quantised y (row) or x (column) position."""

    axis: str  # "row" or "column"
    key: float
    spans: Tuple[Span, ...] = ()

    def text(self, sep: str = " ") -> str:
        """Span texts joined by *sep*."""
        return sep.join(sp.text for sp in self.spans)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "axis": self.axis,
            "key": self.key,
            "spans": [sp.to_dict() for sp in self.spans],
        }
