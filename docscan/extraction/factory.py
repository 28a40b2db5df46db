from typing import Any, ClassVar

from docscan.config.settings import Settings
from docscan.extraction.base import BaseExtractionService
from docscan.extraction.example_client_adapter import ExampleClientAdapter
from docscan.extraction.json_extractor import JsonExtractor
from docscan.extraction.openai_client_adapter import OpenAIClientAdapter
from docscan.validation.provider_config import ProviderConfigValidator


class ExtractorFactory:
    """Creates the configured extraction service."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "mistral": "https://api.mistral.ai/v1",
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }
    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"ollama"})

    @classmethod
    def create(cls, settings: Settings) -> BaseExtractionService:
        """Create a configured extractor from application settings.

        Raises:
            ValueError: if the provider is unknown or misconfigured.
            ValidationError: if the provider connection settings are invalid.
        """
        provider = settings.extraction_provider.lower()
        if provider == "example":
            return JsonExtractor(client=ExampleClientAdapter(), model="example")

        base_url = cls._resolve_base_url(provider, settings)
        api_key = str(cls._setting(settings, provider, "api_key"))
        timeout_seconds = float(cls._setting(settings, provider, "timeout_seconds"))
        keyless = provider in cls.KEYLESS_PROVIDERS
        config: dict[str, object] = {"timeout_seconds": timeout_seconds}
        if not keyless:
            config["api_key"] = api_key
        if base_url is not None:
            config["base_url"] = base_url
        ProviderConfigValidator(
            app_env=settings.app_env, require_api_key=not keyless
        ).assert_valid(config)

        client = OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            base_url=base_url,
        )
        return JsonExtractor(
            client=client,
            model=str(cls._setting(settings, provider, "model_name")),
            temperature=settings.extraction_temperature,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.extraction_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "extraction_openai_compatible_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        raise ValueError(
            f"Unknown extraction provider '{provider}'. "
            f"Choose from: {cls.supported_providers()}"
        )

    @staticmethod
    def _setting(settings: Settings, provider: str, suffix: str) -> Any:
        return getattr(settings, f"extraction_{provider}_{suffix}")
