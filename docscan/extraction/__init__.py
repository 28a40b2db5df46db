from docscan.extraction.base import BaseExtractionService
from docscan.extraction.factory import ExtractorFactory
from docscan.extraction.json_extractor import JsonExtractor
from docscan.extraction.models import ExtractedRecord, ExtractionRequest, SchemaDescriptor

__all__ = [
    "BaseExtractionService",
    "ExtractedRecord",
    "ExtractionRequest",
    "ExtractorFactory",
    "JsonExtractor",
    "SchemaDescriptor",
]
