"""Answers questions about extracted documents through a language model."""

from pathlib import Path

from app.analysis.client_base import BaseAnalysisClient
from app.analysis.prompt_composer import compose
from app.analysis.prompt_loader import load_prompt_template
from app.documents.models import ExtractionResult
from app.exceptions import ConfigurationError, ValidationError
from app.logging.logger import Log


class Analyzer:
    """Composes prompts and sends them to the configured language model client."""

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        max_tokens: int = 1000,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._prompt_template = (
            load_prompt_template(prompt_template_path) if prompt_template_path else None
        )

    async def analyze(self, prompt: str, credential: str) -> str:
        """Send a composed prompt and return the model's answer text."""
        self._require_credential(credential)
        Log.debug(f"Analysis prompt:\n{prompt}")
        answer = await self._client.create_message(
            api_key=credential,
            model=self._model,
            max_tokens=self._max_tokens,
            prompt=prompt,
        )
        Log.info(f"Analysis complete: {len(answer)} chars from model {self._model}")
        return answer

    async def answer(
        self,
        question: str,
        result: ExtractionResult,
        credential: str,
    ) -> str:
        """Validate inputs, compose the prompt for `question` and analyze it."""
        self._require_credential(credential)
        if not result.text:
            raise ValidationError("Document text is required for analysis")
        if not question.strip():
            raise ValidationError("Question is required")
        prompt = compose(question, result, template=self._prompt_template)
        return await self.analyze(prompt, credential)

    def _require_credential(self, credential: str) -> None:
        if self._client.requires_api_key and not credential:
            raise ConfigurationError("Language model API key is required")
