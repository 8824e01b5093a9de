"""Example analysis client adapter.

Returns a fixed answer with no network call. Selected explicitly with
`analysis_provider=example` or `demo_mode=true`, and usable as a template for
new provider adapters (implement BaseAnalysisClient, register in
AnalyzerFactory).
"""

import asyncio
from typing import ClassVar

from app.analysis.client_base import BaseAnalysisClient


class ExampleClientAdapter(BaseAnalysisClient):
    """Adapter that answers every question with the same demo analysis."""

    requires_api_key = False

    DEFAULT_ANSWER: ClassVar[str] = (
        "Based on the document analysis:\n"
        "\n"
        "This appears to be an invoice dated March 14, 2025, with invoice number "
        "INV-2025-001 for a total of $1,250.00.\n"
        "\n"
        "The document contains a table with 3 line items. Each item includes a "
        "description, quantity, and price.\n"
        "\n"
        "Key insights:\n"
        "- The invoice is from the current quarter\n"
        "- The total amount falls within the standard procurement range\n"
        "- All line items appear to be properly categorized\n"
        "\n"
        "Recommendations:\n"
        "- This invoice should be processed according to standard procedures\n"
        "- The payment terms indicate this should be paid within 30 days\n"
        "- This expense should be categorized under the Operations budget"
    )

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds

    async def create_message(
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        prompt: str,
    ) -> str:
        _ = api_key, model, max_tokens, prompt
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        return self.DEFAULT_ANSWER
