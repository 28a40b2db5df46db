from abc import ABC, abstractmethod

from docscan.extraction.models import ExtractedRecord, ExtractionRequest


class BaseExtractionService(ABC):
    """Contract for the extraction boundary."""

    @abstractmethod
    async def extract(self, request: ExtractionRequest) -> ExtractedRecord:
        """Extract a structured record from source text.

        Args:
            request: Source text plus the schema the output must follow.

        Returns:
            The parsed JSON object with its extraction confidence.

        Raises:
            ServiceCallError: classified provider failure or unusable response.
        """
