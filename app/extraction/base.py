from abc import ABC, abstractmethod

from app.documents.models import DocumentHandle, ExtractionCredentials, ExtractionResult


class BaseExtractionClient(ABC):
    """Contract for all document extraction adapters."""

    @abstractmethod
    async def extract(
        self,
        document: DocumentHandle,
        credentials: ExtractionCredentials,
    ) -> ExtractionResult:
        """Extract text, tables and key/value pairs from a document.

        Args:
            document: Binary payload and declared media type.
            credentials: Endpoint and key of the extraction service.
                Adapters that run locally ignore them.

        Returns:
            ExtractionResult in canonical shape.

        Raises:
            ConfigurationError: if required credentials are missing.
            TransportError: on network/HTTP failure or poll timeout.
            JobFailedError: if the service reports a failed job.
        """
