import io

import pdfplumber

from app.documents.models import ExtractionResult
from app.extraction.normalizer import build_grid_from_rows
from app.extraction.pdf_base import BaseLocalPdfExtractor


class PdfPlumberAdapter(BaseLocalPdfExtractor):
    """Extracts text and ruled tables from PDF using pdfplumber."""

    engine_name = "pdfplumber"

    def _extract_pdf(self, pdf_bytes: bytes) -> ExtractionResult:
        pages: list[str] = []
        tables: list[list[list[str]]] = []
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")
                for raw_table in page.extract_tables():
                    grid = build_grid_from_rows(raw_table)
                    if grid:
                        tables.append(grid)
        return ExtractionResult(text="\n".join(pages).strip(), tables=tables)
