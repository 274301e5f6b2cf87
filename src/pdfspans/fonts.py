"""Glyph-width lookup for span merging.

The core never touches a document's font dictionaries directly.  It sees
fonts through the narrow :class:`FontMetrics` protocol, which the ingest
adapter (or any other resolver) implements over its own object model.

Widths are in glyph space, i.e. per 1000 units of the font's em square.
Lookups never fail: fonts in real documents are often only partially
described, so missing data degrades to a default width.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Tuple, Union

# Standard proportional default when a font declares no width at all.
FALLBACK_GLYPH_WIDTH = 500.0

SPACE_CODE = 32


class UnknownFontError(KeyError):
    """Raised when a run references a font identifier with no font handle."""


class FontMetrics(Protocol):
    """Read-only width capability the merge engine depends on."""

    def width_of(self, code: int) -> float: ...

    def default_width(self) -> float: ...


@dataclass(frozen=True)
class WidthTableFont:
    """A simple font described by a ``/FirstChar``..``/LastChar`` width table."""

    first_char: int = 0
    last_char: int = -1
    widths: Tuple[float, ...] = ()
    missing_width: Optional[float] = None

    def width_of(self, code: int) -> float:
        """Width of *code*, or :meth:`default_width` when outside the table."""
        if self.first_char <= code <= self.last_char:
            idx = code - self.first_char
            if idx < len(self.widths):
                return float(self.widths[idx])
        return self.default_width()

    def default_width(self) -> float:
        """Declared missing width, else :data:`FALLBACK_GLYPH_WIDTH`."""
        if self.missing_width is None:
            return FALLBACK_GLYPH_WIDTH
        return float(self.missing_width)


def _usable(width: float) -> bool:
    return math.isfinite(width) and width > 0


def width_of(font: FontMetrics, code: Union[int, str]) -> float:
    """Glyph width of *code* (a character code or a one-character string)."""
    if isinstance(code, str):
        code = ord(code)
    return font.width_of(code)


def space_width(font: FontMetrics) -> float:
    """Width of the space glyph, never zero, negative or non-finite.

    Falls back first to the font's default width, then to
    :data:`FALLBACK_GLYPH_WIDTH`.
    """
    w = width_of(font, SPACE_CODE)
    if _usable(w):
        return w
    w = font.default_width()
    if _usable(w):
        return w
    return FALLBACK_GLYPH_WIDTH


def lookup_font(fonts: Mapping[str, FontMetrics], font_id: str) -> FontMetrics:
    """Return the font handle for *font_id*.

    Raises
    ------
    UnknownFontError
        When the page has no font registered under *font_id*.
    """
    try:
        return fonts[font_id]
    except KeyError:
        raise UnknownFontError(f"No font handle for font id {font_id!r}") from None
