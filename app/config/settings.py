from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    demo_mode: bool = False

    extraction_provider: str = "azure"
    azure_endpoint: str = ""
    azure_key: str = ""
    azure_model_id: str = "prebuilt-document"
    azure_api_version: str = "2023-07-31"

    extraction_poll_interval_seconds: float = 1.0
    extraction_poll_backoff_factor: float = 1.0
    extraction_poll_max_interval_seconds: float = 10.0
    extraction_poll_max_attempts: int = 120
    extraction_timeout_seconds: float = 300.0
    http_timeout_seconds: float = 60.0

    analysis_provider: str = "anthropic"
    analysis_max_tokens: int = 1000

    anthropic_api_key: str = ""
    anthropic_model_name: str = "claude-3-opus-20240229"
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    anthropic_version: str = "2023-06-01"
    anthropic_timeout_seconds: int = 60

    analysis_openai_api_key: str = ""
    analysis_openai_model_name: str = "gpt-4o-mini"
    analysis_openai_timeout_seconds: int = 60
    analysis_openai_compatible_api_key: str = ""
    analysis_openai_compatible_model_name: str = ""
    analysis_openai_compatible_base_url: str = ""
    analysis_openrouter_api_key: str = ""
    analysis_openrouter_model_name: str = ""
    analysis_groq_api_key: str = ""
    analysis_groq_model_name: str = ""
    analysis_together_api_key: str = ""
    analysis_together_model_name: str = ""
    analysis_deepseek_api_key: str = ""
    analysis_deepseek_model_name: str = ""
    analysis_ollama_api_key: str = ""
    analysis_ollama_model_name: str = ""

    config_store: str = "file"
    config_store_path: str = "~/.doc_intake/config.json"
    config_profile: str = "default"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "doc_intake"
    db_username: str = "doc_intake"
    db_password: str = "secret"

    api_host: str = "0.0.0.0"
    api_port: int = 3000
