"""pdfminer text device that replays a page into positioned runs.

pdfplumber's char dicts are produced after layout analysis: character
spacing (Tc) and word spacing (Tw) have already been folded into glyph
positions, and the font survives only as a name.  The merge engine needs
both, so pages are replayed through :class:`RunCollector`, which sees the
live text state of every Tj/TJ operator and emits one
:class:`~pdfspans.models.TextRun` per glyph carrying the Tc/Tw in effect.

Fonts are the interpreter's own :class:`pdfminer.pdffont.PDFFont`
objects, which already resolve ``/Widths``, ``/MissingWidth``, the
standard-14 metrics and CID ``/W`` arrays; :class:`PdfMinerFont` exposes
them through the narrow :class:`~pdfspans.fonts.FontMetrics` interface.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List

from pdfminer.pdfdevice import PDFTextDevice
from pdfminer.pdffont import PDFFont, PDFUnicodeNotDefined
from pdfminer.pdfinterp import PDFPageInterpreter, PDFResourceManager
from pdfminer.pdfpage import PDFPage
from pdfminer.utils import apply_matrix_pt, mult_matrix

from ..models import TextRun

log = logging.getLogger(__name__)

# pdfminer reports widths as fractions of the em; the core works per 1000.
GLYPH_SPACE_UNITS = 1000.0


class PdfMinerFont:
    """:class:`~pdfspans.fonts.FontMetrics` over a pdfminer font object."""

    def __init__(self, font: PDFFont) -> None:
        self.font = font

    def width_of(self, code: int) -> float:
        return self.font.char_width(code) * GLYPH_SPACE_UNITS

    def default_width(self) -> float:
        return float(self.font.default_width) * self.font.hscale * GLYPH_SPACE_UNITS

    def __repr__(self) -> str:
        return f"PdfMinerFont({self.font!r})"


def _font_name(font: PDFFont) -> str:
    name = getattr(font, "basefont", None) or font.fontname
    return str(name) if name else "unknown"


class RunCollector(PDFTextDevice):
    """Collect one :class:`TextRun` per rendered glyph.

    Coordinates are PDF user space after the page CTM.  Tc and Tw are
    scaled by the horizontal scaling (Tz) and the text matrix, so they are
    in the same units as the run positions.  Tw is zero for multi-byte
    fonts, where the PDF word-spacing rule never applies.
    """

    def __init__(self, rsrcmgr: PDFResourceManager, page: int = 0) -> None:
        super().__init__(rsrcmgr)
        self.page = page
        self.runs: List[TextRun] = []
        self.fonts: Dict[str, PdfMinerFont] = {}
        self._ids: Dict[int, str] = {}
        self._font_id = "unknown"
        self._char_spacing = 0.0
        self._word_spacing = 0.0

    def font_id(self, font: PDFFont) -> str:
        """Identifier for *font*; two different fonts never share one.

        Subset or embedded copies of a face often carry the same
        ``/BaseFont``.  The second such font is registered as
        ``"<name>#2"`` so its own widths are used for its runs.
        """
        key = id(font)
        if key in self._ids:
            return self._ids[key]
        name = _font_name(font)
        font_id = name
        n = 1
        while font_id in self.fonts:
            n += 1
            font_id = f"{name}#{n}"
        if font_id != name:
            log.debug(
                "Page %d: font %r already registered; new font stored as %r",
                self.page,
                name,
                font_id,
            )
        self._ids[key] = font_id
        self.fonts[font_id] = PdfMinerFont(font)
        return font_id

    def render_string(self, textstate, seq, ncs, graphicstate) -> None:
        matrix = mult_matrix(textstate.matrix, self.ctm)
        xscale = math.hypot(matrix[0], matrix[1]) * textstate.scaling * 0.01
        font = textstate.font
        self._font_id = self.font_id(font)
        self._char_spacing = textstate.charspace * xscale
        if font.is_multibyte():
            self._word_spacing = 0.0
        else:
            self._word_spacing = textstate.wordspace * xscale
        super().render_string(textstate, seq, ncs, graphicstate)

    def render_char(
        self, matrix, font, fontsize, scaling, rise, cid, ncs, graphicstate
    ) -> float:
        adv = font.char_width(cid) * fontsize * scaling
        x0, y0 = apply_matrix_pt(matrix, (0, rise))
        x1, _ = apply_matrix_pt(matrix, (adv, rise))
        try:
            text = font.to_unichr(cid)
        except PDFUnicodeNotDefined:
            text = f"(cid:{cid})"
        self.runs.append(
            TextRun(
                text=text,
                font=self._font_id,
                font_size=fontsize * math.hypot(matrix[2], matrix[3]),
                x=x0,
                y=y0,
                w=x1 - x0,
                char_spacing=self._char_spacing,
                word_spacing=self._word_spacing,
                page=self.page,
            )
        )
        return adv


def collect_page_runs(page_obj: PDFPage, page: int = 0) -> RunCollector:
    """Interpret one pdfminer page and return the filled collector."""
    rsrcmgr = PDFResourceManager(caching=True)
    device = RunCollector(rsrcmgr, page)
    PDFPageInterpreter(rsrcmgr, device).process_page(page_obj)
    log.debug(
        "Page %d: interpreted %d glyph runs in %d fonts",
        page,
        len(device.runs),
        len(device.fonts),
    )
    return device
