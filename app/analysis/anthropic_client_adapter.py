"""Anthropic Messages API adapter.

Request: POST {base_url}/messages with x-api-key and anthropic-version headers,
body {model, max_tokens, messages: [{role: "user", content: prompt}]}.
Response: {"content": [{"type": "text", "text": "..."}], "stop_reason": "..."}
"""

from typing import Any

import httpx

from app.analysis.client_base import BaseAnalysisClient
from app.exceptions import EmptyResponseError, TransportError
from app.logging.logger import Log


class AnthropicClientAdapter(BaseAnalysisClient):
    """Language model client for the Anthropic Messages API."""

    def __init__(
        self,
        *,
        base_url: str = "https://api.anthropic.com/v1",
        api_version: str = "2023-06-01",
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._messages_url = f"{base_url.rstrip('/')}/messages"
        self._api_version = api_version
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def create_message(
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        prompt: str,
    ) -> str:
        headers = {
            "x-api-key": api_key,
            "anthropic-version": self._api_version,
            "content-type": "application/json",
        }
        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self._messages_url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise TransportError(f"Language model network error: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(
                f"Language model API error: HTTP {response.status_code}: "
                f"{self._error_message(response)}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"Language model returned invalid JSON: {exc}") from exc

        stop_reason = data.get("stop_reason") if isinstance(data, dict) else None
        if stop_reason == "max_tokens":
            Log.warning("Language model response truncated at max_tokens")
        return self._first_text(data)

    @staticmethod
    def _first_text(data: Any) -> str:
        blocks = data.get("content") if isinstance(data, dict) else None
        for block in blocks or []:
            if isinstance(block, dict) and block.get("type", "text") == "text":
                text = block.get("text")
                if text:
                    return str(text)
        raise EmptyResponseError("Language model returned no text segment")

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:500]
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return f"{error.get('type', 'error')}: {error['message']}"
        return response.text[:500]
