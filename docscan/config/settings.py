from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    ocr_provider: str = "mistral"
    ocr_mistral_api_key: str = ""
    ocr_mistral_model: str = "mistral-ocr-latest"
    ocr_mistral_base_url: str = "https://api.mistral.ai/v1"
    ocr_timeout_seconds: float = 30.0
    ocr_example_text: str = ""

    extraction_provider: str = "mistral"
    extraction_temperature: float = 0.0

    extraction_mistral_api_key: str = ""
    extraction_mistral_model_name: str = "mistral-large-latest"
    extraction_mistral_timeout_seconds: int = 30

    extraction_openai_api_key: str = ""
    extraction_openai_model_name: str = ""
    extraction_openai_timeout_seconds: int = 30

    extraction_openai_compatible_base_url: str = ""
    extraction_openai_compatible_api_key: str = ""
    extraction_openai_compatible_model_name: str = ""
    extraction_openai_compatible_timeout_seconds: int = 30

    extraction_openrouter_api_key: str = ""
    extraction_openrouter_model_name: str = ""
    extraction_openrouter_timeout_seconds: int = 30

    extraction_groq_api_key: str = ""
    extraction_groq_model_name: str = ""
    extraction_groq_timeout_seconds: int = 30

    extraction_together_api_key: str = ""
    extraction_together_model_name: str = ""
    extraction_together_timeout_seconds: int = 30

    extraction_deepseek_api_key: str = ""
    extraction_deepseek_model_name: str = ""
    extraction_deepseek_timeout_seconds: int = 30

    extraction_ollama_api_key: str = "ollama"
    extraction_ollama_model_name: str = ""
    extraction_ollama_timeout_seconds: int = 60

    retry_initial_interval_ms: int = 500
    retry_max_interval_ms: int = 10000
    retry_backoff_exponent: float = 1.8
    retry_max_elapsed_time_ms: int = 25000
    retry_on_connection_error: bool = True
    retry_attempt_timeout_seconds: float | None = None

    hallucination_policy: Literal["warn", "reject"] = "warn"
