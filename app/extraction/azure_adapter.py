"""Azure AI Document Intelligence adapter (REST, asynchronous analyze jobs)."""

import asyncio
import time
from typing import Any

import httpx

from app.documents.models import DocumentHandle, ExtractionCredentials, ExtractionResult
from app.exceptions import ConfigurationError, JobFailedError, JobTimeoutError, TransportError
from app.extraction.base import BaseExtractionClient
from app.extraction.models import PollPolicy
from app.extraction.normalizer import build_extraction_result
from app.logging.logger import Log

_KEY_HEADER = "Ocp-Apim-Subscription-Key"
_IN_PROGRESS_STATUSES = frozenset({"notstarted", "running"})


class AzureDocumentIntelligenceClient(BaseExtractionClient):
    """Submits a document for analysis and polls the job until it finishes."""

    def __init__(
        self,
        *,
        model_id: str = "prebuilt-document",
        api_version: str = "2023-07-31",
        poll_policy: PollPolicy | None = None,
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._model_id = model_id
        self._api_version = api_version
        self._poll_policy = poll_policy or PollPolicy()
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def extract(
        self,
        document: DocumentHandle,
        credentials: ExtractionCredentials,
    ) -> ExtractionResult:
        if not credentials.endpoint or not credentials.key:
            raise ConfigurationError("Extraction endpoint and key are required")

        async with httpx.AsyncClient(
            timeout=self._timeout_seconds,
            transport=self._transport,
        ) as client:
            operation_url = await self._submit(client, document, credentials)
            Log.info(f"Extraction job accepted: {operation_url}")
            payload = await self._poll(client, operation_url, credentials.key)

        result = build_extraction_result(payload.get("analyzeResult") or {})
        Log.info(
            f"Extraction complete: {len(result.text)} chars, "
            f"{len(result.tables)} tables, {len(result.key_value_pairs)} key/value pairs"
        )
        return result

    def analyze_url(self, endpoint: str) -> str:
        return (
            f"{endpoint.rstrip('/')}/formrecognizer/documentModels/"
            f"{self._model_id}:analyze"
        )

    async def _submit(
        self,
        client: httpx.AsyncClient,
        document: DocumentHandle,
        credentials: ExtractionCredentials,
    ) -> str:
        response = await self._request(
            client,
            "POST",
            self.analyze_url(credentials.endpoint),
            params={"api-version": self._api_version},
            headers={
                _KEY_HEADER: credentials.key,
                "Content-Type": document.media_type or "application/octet-stream",
            },
            content=document.content,
        )
        operation_url = response.headers.get("Operation-Location")
        if not operation_url:
            raise TransportError("Extraction service returned no Operation-Location header")
        return operation_url

    async def _poll(
        self,
        client: httpx.AsyncClient,
        operation_url: str,
        key: str,
    ) -> dict[str, Any]:
        policy = self._poll_policy
        deadline = time.monotonic() + policy.timeout_seconds
        interval = policy.interval_seconds

        for attempt in range(1, policy.max_attempts + 1):
            response = await self._request(
                client, "GET", operation_url, headers={_KEY_HEADER: key}
            )
            payload = self._parse_json(response)
            status = str(payload.get("status", "")).lower()

            if status == "succeeded":
                return payload
            if status == "failed":
                raise JobFailedError(f"Extraction job failed: {self._job_error(payload)}")
            if status not in _IN_PROGRESS_STATUSES:
                Log.warning(f"Unexpected extraction job status {status!r}, still polling")

            Log.debug(f"Extraction job {status} (poll {attempt}/{policy.max_attempts})")
            if attempt == policy.max_attempts:
                break
            if time.monotonic() + interval > deadline:
                raise JobTimeoutError(
                    f"Extraction job did not finish within {policy.timeout_seconds}s"
                )
            await asyncio.sleep(interval)
            interval = policy.next_interval(interval)

        raise JobTimeoutError(
            f"Extraction job did not finish after {policy.max_attempts} polls"
        )

    @staticmethod
    async def _request(
        client: httpx.AsyncClient,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"Extraction service network error: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(
                f"Extraction service returned HTTP {response.status_code}: "
                f"{response.text[:500]}"
            )
        return response

    @staticmethod
    def _parse_json(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"Extraction service returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise TransportError("Extraction service response must be a JSON object")
        return payload

    @staticmethod
    def _job_error(payload: dict[str, Any]) -> str:
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return "service reported status 'failed'"
