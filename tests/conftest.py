"""Shared test fixtures for pdfspans."""

from pathlib import Path
from typing import Dict

import pytest

from pdfspans.config import GroupingConfig, MergeOptions
from pdfspans.fonts import WidthTableFont
from pdfspans.models import Line, Span, TextRun

# ── Helpers ────────────────────────────────────────────────────────────


def make_font(space_width: float = 500.0, missing_width=None) -> WidthTableFont:
    """Width table holding only the space glyph (code 32)."""
    return WidthTableFont(
        first_char=32,
        last_char=32,
        widths=(space_width,),
        missing_width=missing_width,
    )


def make_run(
    text: str,
    x: float,
    y: float = 700.0,
    w: float | None = None,
    font: str = "F1",
    size: float = 12.0,
    page: int = 0,
    char_spacing: float = 0.0,
    word_spacing: float = 0.0,
) -> TextRun:
    """Create a TextRun with sane defaults (5 units per character)."""
    if w is None:
        w = 5.0 * len(text)
    return TextRun(
        text=text,
        font=font,
        font_size=size,
        x=x,
        y=y,
        w=w,
        char_spacing=char_spacing,
        word_spacing=word_spacing,
        page=page,
    )


def make_span(
    text: str,
    x: float,
    y: float = 700.0,
    w: float | None = None,
    font: str = "F1",
    size: float = 12.0,
    page: int = 0,
) -> Span:
    """Create a single-run Span."""
    return Span.from_run(make_run(text, x, y, w, font=font, size=size, page=page))


def make_line(*spans: Span) -> Line:
    """Build a Line whose baseline is the first span's."""
    return Line(page=spans[0].page, baseline_y=spans[0].y, spans=tuple(spans))


HELVETICA_FONT = b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>"


def make_pdf(
    path: Path,
    content: bytes,
    fonts: Dict[str, bytes] | None = None,
    info: bytes | None = None,
) -> Path:
    """Write a one-page 612x792 PDF whose content stream is *content*.

    *fonts* maps resource names (``F1``) to font dictionary source and
    defaults to Helvetica as ``F1``.  *info* is an optional document
    information dictionary.
    """
    fonts = fonts if fonts is not None else {"F1": HELVETICA_FONT}
    font_refs = b" ".join(
        b"/%s %d 0 R" % (name.encode("ascii"), 5 + i) for i, name in enumerate(fonts)
    )
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792]"
        b" /Resources << /Font << " + font_refs + b" >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        *fonts.values(),
    ]
    trailer = b"/Root 1 0 R"
    if info is not None:
        objects.append(info)
        trailer += b" /Info %d 0 R" % len(objects)

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d %s >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        trailer,
        xref_at,
    )
    path.write_bytes(bytes(out))
    return path


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture
def default_cfg():
    """Return a default GroupingConfig."""
    return GroupingConfig()


@pytest.fixture
def default_options():
    """Return a default MergeOptions."""
    return MergeOptions()


@pytest.fixture
def fonts():
    """F1 has a narrow space (250), F2 a wide one (500)."""
    return {"F1": make_font(250.0), "F2": make_font(500.0)}


@pytest.fixture
def two_block_runs():
    """Runs for a short page: a two-line paragraph, then a second paragraph.

    With F1 at size 10 the merge threshold is 3.75 units, so runs that
    abut (gap 0) fold together while the lines stay apart.
    """
    return [
        make_run("The ", 72.0, 700.0, 20.0, size=10.0),
        make_run("quick", 92.0, 700.0, 25.0, size=10.0),
        make_run("fox", 72.0, 688.0, 15.0, size=10.0),
        make_run("Next ", 72.0, 640.0, 25.0, size=10.0),
        make_run("para", 97.0, 640.0, 20.0, size=10.0),
    ]
