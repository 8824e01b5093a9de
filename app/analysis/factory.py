from typing import ClassVar

from app.analysis.analyzer import Analyzer
from app.analysis.anthropic_client_adapter import AnthropicClientAdapter
from app.analysis.client_base import BaseAnalysisClient
from app.analysis.example_client_adapter import ExampleClientAdapter
from app.analysis.openai_client_adapter import OpenAIClientAdapter
from app.config.settings import Settings


class AnalyzerFactory:
    """Creates the analyzer for the configured language model provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> Analyzer:
        """Create a configured analyzer from application settings."""
        provider = "example" if settings.demo_mode else settings.analysis_provider.lower()
        return Analyzer(
            client=cls._create_client(provider, settings),
            model=cls._resolve_model_name(provider, settings),
            max_tokens=settings.analysis_max_tokens,
        )

    @classmethod
    def default_api_key(cls, settings: Settings) -> str:
        """API key configured in settings for the selected provider."""
        provider = settings.analysis_provider.lower()
        key_map = {
            "anthropic": settings.anthropic_api_key,
            "openai": settings.analysis_openai_api_key,
            "openai_compatible": settings.analysis_openai_compatible_api_key,
            "openrouter": settings.analysis_openrouter_api_key,
            "groq": settings.analysis_groq_api_key,
            "together": settings.analysis_together_api_key,
            "deepseek": settings.analysis_deepseek_api_key,
            "ollama": settings.analysis_ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseAnalysisClient:
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "anthropic":
            return AnthropicClientAdapter(
                base_url=settings.anthropic_base_url,
                api_version=settings.anthropic_version,
                timeout_seconds=settings.anthropic_timeout_seconds,
            )
        return OpenAIClientAdapter(
            timeout_seconds=settings.analysis_openai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.analysis_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "analysis_openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "anthropic",
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown analysis provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "example": "example",
            "anthropic": settings.anthropic_model_name,
            "openai": settings.analysis_openai_model_name,
            "openai_compatible": settings.analysis_openai_compatible_model_name,
            "openrouter": settings.analysis_openrouter_model_name,
            "groq": settings.analysis_groq_model_name,
            "together": settings.analysis_together_model_name,
            "deepseek": settings.analysis_deepseek_model_name,
            "ollama": settings.analysis_ollama_model_name,
        }
        return key_map.get(provider, "") or ""
