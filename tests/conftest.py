import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _pdf(*pages: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for index, lines in enumerate(pages):
        if index:
            c.showPage()
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 20
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Single-page PDF with known text content."""
    return _pdf(["Hello PDF World"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Two-page PDF with known text on each page."""
    return _pdf(["Page one content"], ["Page two content"])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Valid PDF with a blank page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def check_pdf_bytes() -> bytes:
    """Text-layer PDF of a bank check."""
    return _pdf(["Check #12345", "Pay to: John Smith", "Amount: $1,234.56"])
