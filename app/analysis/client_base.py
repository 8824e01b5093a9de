from abc import ABC, abstractmethod


class BaseAnalysisClient(ABC):
    """Contract for provider-specific language model clients."""

    requires_api_key: bool = True

    @abstractmethod
    async def create_message(
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        prompt: str,
    ) -> str:
        """Send `prompt` as a single user message and return the answer text.

        Raises:
            TransportError: on network, HTTP or provider API failure.
            EmptyResponseError: if the provider returns no text.
        """
