from typing import ClassVar

from app.config.settings import Settings
from app.extraction.azure_adapter import AzureDocumentIntelligenceClient
from app.extraction.base import BaseExtractionClient
from app.extraction.example_client_adapter import ExampleExtractionClient
from app.extraction.models import PollPolicy
from app.extraction.pdf_base import BaseLocalPdfExtractor
from app.extraction.pdfplumber_adapter import PdfPlumberAdapter
from app.extraction.pymupdf_adapter import PyMuPdfAdapter


class ExtractionClientFactory:
    """Creates the configured extraction adapter."""

    LOCAL_ADAPTERS: ClassVar[dict[str, type[BaseLocalPdfExtractor]]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseExtractionClient:
        """Create an extraction client from application settings."""
        provider = "example" if settings.demo_mode else settings.extraction_provider.lower()
        if provider == "example":
            return ExampleExtractionClient()
        if provider == "azure":
            return AzureDocumentIntelligenceClient(
                model_id=settings.azure_model_id,
                api_version=settings.azure_api_version,
                poll_policy=cls.poll_policy(settings),
                timeout_seconds=settings.http_timeout_seconds,
            )
        adapter_cls = cls.LOCAL_ADAPTERS.get(provider)
        if adapter_cls is None:
            supported = ["azure", "example", *sorted(cls.LOCAL_ADAPTERS)]
            raise ValueError(
                f"Unknown extraction provider '{provider}'. Choose from: {supported}"
            )
        return adapter_cls()

    @staticmethod
    def poll_policy(settings: Settings) -> PollPolicy:
        return PollPolicy(
            interval_seconds=settings.extraction_poll_interval_seconds,
            backoff_factor=settings.extraction_poll_backoff_factor,
            max_interval_seconds=settings.extraction_poll_max_interval_seconds,
            max_attempts=settings.extraction_poll_max_attempts,
            timeout_seconds=settings.extraction_timeout_seconds,
        )
