"""Tests for pdfspans.ingest — validation, metadata and page extraction."""

from unittest.mock import MagicMock, patch

import pytest
from conftest import make_pdf

from pdfspans.ingest import (
    IngestError,
    PageInfo,
    PdfMeta,
    PdfMinerFont,
    extract_page_runs,
    ingest_pdf,
)
from pdfspans.pipeline import run_document, run_pdf_page


def _fake_pdf_file(tmp_path):
    f = tmp_path / "test.pdf"
    # Write a minimal PDF header so the extension check passes
    f.write_bytes(b"%PDF-1.4\n%%EOF")
    return f


def _mock_pdf(pages, metadata=None):
    mock_pdf = MagicMock()
    mock_pdf.pages = pages
    mock_pdf.metadata = metadata
    mock_pdf.__enter__ = MagicMock(return_value=mock_pdf)
    mock_pdf.__exit__ = MagicMock(return_value=False)
    return mock_pdf


LETTER_SPACED = b"BT /F1 12 Tf 8 Tc 72 700 Td (HELLO) Tj ET"


# ── Data classes ───────────────────────────────────────────────────────


class TestPdfMeta:
    def test_page_lookup(self, tmp_path):
        meta = PdfMeta(
            path=tmp_path / "a.pdf",
            num_pages=2,
            pages=[PageInfo(0, 612.0, 792.0), PageInfo(1, 792.0, 612.0)],
        )
        assert meta.page(1).width == 792.0


# ── Validation tests ──────────────────────────────────────────────────


class TestValidation:
    def test_missing_file(self, tmp_path):
        with pytest.raises(IngestError, match="not found"):
            ingest_pdf(tmp_path / "nonexistent.pdf")

    def test_directory_not_file(self, tmp_path):
        d = tmp_path / "subdir.pdf"
        d.mkdir()
        with pytest.raises(IngestError, match="Not a file"):
            ingest_pdf(d)

    def test_empty_file(self, tmp_path):
        f = tmp_path / "empty.pdf"
        f.write_bytes(b"")
        with pytest.raises(IngestError, match="Empty file"):
            ingest_pdf(f)

    def test_wrong_extension(self, tmp_path):
        f = tmp_path / "data.txt"
        f.write_text("hello")
        with pytest.raises(IngestError, match="Not a PDF"):
            ingest_pdf(f)

    def test_corrupt_pdf(self, tmp_path):
        """A file with .pdf extension but invalid contents."""
        f = tmp_path / "corrupt.pdf"
        f.write_bytes(b"this is not a pdf file at all")
        with pytest.raises(IngestError, match="Cannot open PDF"):
            ingest_pdf(f)

    def test_extract_validates_too(self, tmp_path):
        with pytest.raises(IngestError, match="not found"):
            extract_page_runs(tmp_path / "nonexistent.pdf", 0)


# ── ingest_pdf ─────────────────────────────────────────────────────────


class TestIngestPdf:
    def test_basic_ingest(self, tmp_path):
        pdf_path = _fake_pdf_file(tmp_path)
        mock_pdf = _mock_pdf(
            [
                MagicMock(width=612.0, height=792.0),
                MagicMock(width=2448.0, height=1584.0),
            ],
            metadata={"Title": "Quarterly Report", "Producer": b"Writer\x00"},
        )
        with patch("pdfspans.ingest.ingest.pdfplumber.open", return_value=mock_pdf):
            meta = ingest_pdf(pdf_path)

        assert meta.num_pages == 2
        assert meta.page(1).width == 2448.0
        assert meta.pdf_metadata["Title"] == "Quarterly Report"
        assert "Writer" in meta.pdf_metadata["Producer"]
        assert meta.file_size_bytes > 0

    def test_no_metadata(self, tmp_path):
        pdf_path = _fake_pdf_file(tmp_path)
        mock_pdf = _mock_pdf([MagicMock(width=100.0, height=200.0)])
        with patch("pdfspans.ingest.ingest.pdfplumber.open", return_value=mock_pdf):
            meta = ingest_pdf(str(pdf_path))
        assert meta.pdf_metadata == {}

    def test_real_document(self, tmp_path):
        path = make_pdf(
            tmp_path / "doc.pdf", LETTER_SPACED, info=b"<< /Title (Spaced Out) >>"
        )
        meta = ingest_pdf(path)
        assert meta.num_pages == 1
        assert meta.page(0).width == 612.0
        assert meta.page(0).height == 792.0
        assert meta.pdf_metadata["Title"] == "Spaced Out"


# ── extract_page_runs ──────────────────────────────────────────────────


class TestExtractPageRuns:
    def test_runs_and_fonts(self, tmp_path):
        path = make_pdf(tmp_path / "doc.pdf", b"BT /F1 10 Tf 72 700 Td (Hi) Tj ET")
        pr = extract_page_runs(path, 0)
        assert [r.text for r in pr.runs] == ["H", "i"]
        assert set(pr.fonts) == {"Helvetica"}
        assert isinstance(pr.fonts["Helvetica"], PdfMinerFont)
        assert (pr.width, pr.height) == (612.0, 792.0)
        assert pr.page == 0

    def test_char_spacing_carried(self, tmp_path):
        pr = extract_page_runs(make_pdf(tmp_path / "doc.pdf", LETTER_SPACED), 0)
        assert [r.text for r in pr.runs] == list("HELLO")
        assert all(r.char_spacing == pytest.approx(8.0) for r in pr.runs)

    def test_every_run_font_has_a_handle(self, tmp_path):
        content = b"BT /F1 12 Tf 72 700 Td (a) Tj /F2 12 Tf (b) Tj ET"
        fonts = {
            "F1": b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
            "F2": b"<< /Type /Font /Subtype /Type1 /BaseFont /Courier >>",
        }
        pr = extract_page_runs(make_pdf(tmp_path / "doc.pdf", content, fonts), 0)
        assert {r.font for r in pr.runs} == {"Helvetica", "Courier"}
        assert pr.fonts["Courier"].width_of(32) == pytest.approx(600.0)

    def test_page_out_of_range(self, tmp_path):
        path = make_pdf(tmp_path / "doc.pdf", b"")
        with pytest.raises(IngestError, match="out of range"):
            extract_page_runs(path, 3)

    def test_open_failure_wrapped(self, tmp_path):
        pdf_path = _fake_pdf_file(tmp_path)
        with patch(
            "pdfspans.ingest.ingest.pdfplumber.open", side_effect=OSError("denied")
        ):
            with pytest.raises(IngestError, match="Cannot read page 0"):
                extract_page_runs(pdf_path, 0)


# ── Through the pipeline ───────────────────────────────────────────────


class TestRealPdfPipeline:
    def test_letter_spaced_word_stays_one_span(self, tmp_path):
        pr = run_pdf_page(make_pdf(tmp_path / "doc.pdf", LETTER_SPACED), 0)
        assert [sp.text for sp in pr.spans] == ["HELLO"]
        assert pr.text() == "HELLO\n"

    def test_tj_gap_splits_words(self, tmp_path):
        content = b"BT /F1 12 Tf 72 700 Td [(Hello) -1000 (world)] TJ ET"
        pr = run_pdf_page(make_pdf(tmp_path / "doc.pdf", content), 0)
        assert [sp.text for sp in pr.spans] == ["Hello", "world"]
        assert pr.text() == "Hello world\n"

    def test_word_spacing_keeps_words_in_one_span(self, tmp_path):
        content = b"BT /F1 12 Tf 5 Tw 72 700 Td (to be) Tj ET"
        pr = run_pdf_page(make_pdf(tmp_path / "doc.pdf", content), 0)
        assert [sp.text for sp in pr.spans] == ["to be"]

    def test_run_document(self, tmp_path):
        path = make_pdf(
            tmp_path / "doc.pdf", LETTER_SPACED, info=b"<< /Author (Typesetter) >>"
        )
        doc = run_document(path)
        assert doc.failed_pages() == []
        assert doc.text() == "HELLO\n"
        assert doc.metadata["Author"] == "Typesetter"
        assert doc.pages[0].stages["ingest"].status == "success"
