"""Example extraction adapter.

Returns fixed demo data without any network call. Selected explicitly with
`extraction_provider=example` or `demo_mode=true`; never used as a silent
fallback for a failing real client.
"""

import asyncio
from typing import ClassVar

from app.documents.models import (
    DocumentHandle,
    ExtractionCredentials,
    ExtractionResult,
    KeyValuePair,
)
from app.extraction.base import BaseExtractionClient


class ExampleExtractionClient(BaseExtractionClient):
    """Adapter that returns a fixed invoice-like extraction result."""

    DEFAULT_RESULT: ClassVar[ExtractionResult] = ExtractionResult(
        text="This is the extracted text from the document...",
        tables=[
            [
                ["Header 1", "Header 2", "Header 3"],
                ["Value 1", "Value 2", "Value 3"],
                ["Value 4", "Value 5", "Value 6"],
            ]
        ],
        key_value_pairs=[
            KeyValuePair(key="Invoice Number", value="INV-2025-001"),
            KeyValuePair(key="Date", value="2025-03-14"),
            KeyValuePair(key="Total Amount", value="$1,250.00"),
        ],
    )

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds

    async def extract(
        self,
        document: DocumentHandle,
        credentials: ExtractionCredentials,
    ) -> ExtractionResult:
        _ = document, credentials
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        return self.DEFAULT_RESULT
