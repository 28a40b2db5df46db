import pytest

from docscan.confidence.model import ConfidenceModel
from docscan.documents.registry import DocumentRegistry
from docscan.extraction.example_client_adapter import ExampleClientAdapter
from docscan.extraction.json_extractor import JsonExtractor
from docscan.hallucination.factory import HallucinationDetectorFactory
from docscan.retry.config import RetryConfig


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(
        initial_interval_ms=100,
        max_interval_ms=1000,
        backoff_exponent=2.0,
        max_elapsed_time_ms=1000,
        retry_on_connection_error=True,
    )


@pytest.fixture
def example_extractor() -> JsonExtractor:
    return JsonExtractor(client=ExampleClientAdapter(), model="example")


@pytest.fixture(scope="session")
def registry() -> DocumentRegistry:
    return DocumentRegistry.default()


@pytest.fixture
def pipeline_parts(registry: DocumentRegistry) -> dict[str, object]:
    return {
        "registry": registry,
        "confidence_model": ConfidenceModel(),
        "detector_factory": HallucinationDetectorFactory(),
    }
