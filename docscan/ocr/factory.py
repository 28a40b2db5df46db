from docscan.config.settings import Settings
from docscan.ocr.base import BaseOcrService
from docscan.ocr.example_adapter import ExampleOcrAdapter
from docscan.ocr.mistral_adapter import MistralOcrAdapter
from docscan.ocr.pdfplumber_adapter import PdfPlumberOcrAdapter
from docscan.validation.provider_config import ProviderConfigValidator


class OcrServiceFactory:
    """Creates the configured OCR boundary adapter."""

    PROVIDERS: tuple[str, ...] = ("example", "mistral", "pdfplumber")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrService:
        """Create an OCR adapter from application settings.

        Raises:
            ValueError: if the provider is unknown.
            ValidationError: if the Mistral connection settings are invalid.
        """
        provider = settings.ocr_provider.lower()
        if provider == "example":
            pages = [settings.ocr_example_text] if settings.ocr_example_text else None
            return ExampleOcrAdapter(pages=pages)
        if provider == "pdfplumber":
            return PdfPlumberOcrAdapter()
        if provider == "mistral":
            ProviderConfigValidator(app_env=settings.app_env).assert_valid(
                {
                    "api_key": settings.ocr_mistral_api_key,
                    "base_url": settings.ocr_mistral_base_url,
                    "timeout_seconds": settings.ocr_timeout_seconds,
                }
            )
            return MistralOcrAdapter(
                api_key=settings.ocr_mistral_api_key,
                model=settings.ocr_mistral_model,
                base_url=settings.ocr_mistral_base_url,
                timeout_seconds=settings.ocr_timeout_seconds,
            )
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
