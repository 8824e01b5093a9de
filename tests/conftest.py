import io

import pytest
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle

from app.documents.models import DocumentHandle, ExtractionResult, KeyValuePair


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def table_pdf_bytes() -> bytes:
    """Generate a PDF holding one ruled 3x3 table."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=letter)
    table = Table(
        [["Item", "Qty", "Price"], ["Widget", "2", "$5"], ["Gadget", "1", "$10"]],
        colWidths=[120, 60, 80],
    )
    table.setStyle(TableStyle([("GRID", (0, 0), (-1, -1), 1, colors.black)]))
    doc.build([table])
    return buf.getvalue()


@pytest.fixture()
def invoice_result() -> ExtractionResult:
    return ExtractionResult(
        text="Invoice #1",
        tables=[[["A", "B"], ["1", "2"]]],
        key_value_pairs=[KeyValuePair(key="Total", value="$10")],
    )


@pytest.fixture()
def pdf_document(sample_pdf_bytes: bytes) -> DocumentHandle:
    return DocumentHandle(
        content=sample_pdf_bytes,
        media_type="application/pdf",
        filename="sample.pdf",
    )
