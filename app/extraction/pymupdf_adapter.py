import pymupdf

from app.documents.models import ExtractionResult
from app.extraction.pdf_base import BaseLocalPdfExtractor


class PyMuPdfAdapter(BaseLocalPdfExtractor):
    """Extracts text from PDF using PyMuPDF (no table detection)."""

    engine_name = "pymupdf"

    def _extract_pdf(self, pdf_bytes: bytes) -> ExtractionResult:
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            pages = [page.get_text() for page in doc]
        return ExtractionResult(text="\n".join(pages).strip())
