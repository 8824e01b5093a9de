import asyncio
from abc import abstractmethod

from app.documents.models import DocumentHandle, ExtractionCredentials, ExtractionResult
from app.exceptions import ExtractionError, ValidationError
from app.extraction.base import BaseExtractionClient

PDF_MEDIA_TYPE = "application/pdf"


class BaseLocalPdfExtractor(BaseExtractionClient):
    """Extracts PDFs in-process with a PDF library instead of a remote service."""

    engine_name = "pdf"

    async def extract(
        self,
        document: DocumentHandle,
        credentials: ExtractionCredentials,
    ) -> ExtractionResult:
        _ = credentials
        if not is_pdf(document):
            raise ValidationError(
                f"{self.engine_name} extraction supports PDF documents only, "
                f"got '{document.media_type}'"
            )
        return await asyncio.to_thread(self._extract_or_raise, document.content)

    def _extract_or_raise(self, pdf_bytes: bytes) -> ExtractionResult:
        try:
            return self._extract_pdf(pdf_bytes)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"{self.engine_name} extraction failed: {exc}") from exc

    @abstractmethod
    def _extract_pdf(self, pdf_bytes: bytes) -> ExtractionResult:
        """Run the library on raw PDF bytes (blocking)."""


def is_pdf(document: DocumentHandle) -> bool:
    return document.media_type == PDF_MEDIA_TYPE or document.content.startswith(b"%PDF")
