import httpx
import openai

from app.analysis.client_base import BaseAnalysisClient
from app.exceptions import EmptyResponseError, TransportError


class OpenAIClientAdapter(BaseAnalysisClient):
    """Language model client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._base_url = base_url

    async def create_message(
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        prompt: str,
    ) -> str:
        client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=self._timeout_seconds,
            base_url=self._base_url,
        )
        try:
            response = await client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise TransportError(f"Language model network error: {exc}") from exc
        except openai.APIError as exc:
            raise TransportError(f"Language model API error: {exc}") from exc
        finally:
            await client.close()

        if not response.choices:
            raise EmptyResponseError("Language model returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise EmptyResponseError("Language model returned empty response")
        return content
