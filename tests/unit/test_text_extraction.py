"""Unit tests for PDF text extraction."""

from io import BytesIO

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from comicbook.api.services.text_extraction import PdfTextExtractor
from comicbook.core.errors import TextExtractionError


def make_pdf(pages: list[str]) -> bytes:
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    for text in pages:
        pdf.drawString(72, 720, text)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def test_extracts_every_page_in_order():
    data = make_pdf(["Once upon a time", "they lived happily"])

    text = PdfTextExtractor().extract(data)

    assert text.split("\n") == ["Once upon a time", "they lived happily"]


def test_blank_page_gives_empty_text():
    assert PdfTextExtractor().extract(make_pdf([""])).strip() == ""


def test_malformed_pdf_raises_extraction_error():
    with pytest.raises(TextExtractionError, match="Failed to extract text from PDF"):
        PdfTextExtractor().extract(b"this is not a pdf")
