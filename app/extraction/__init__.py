from app.extraction.base import BaseExtractionClient
from app.extraction.factory import ExtractionClientFactory

__all__ = ["BaseExtractionClient", "ExtractionClientFactory"]
