from docscan.validation.base import Validator
from docscan.validation.composite import ListValidator, NullableValidator, ObjectValidator
from docscan.validation.exceptions import ValidationError
from docscan.validation.models import ValidationIssue
from docscan.validation.schema_builder import validator_from_schema

__all__ = [
    "ListValidator",
    "NullableValidator",
    "ObjectValidator",
    "ValidationError",
    "ValidationIssue",
    "Validator",
    "validator_from_schema",
]
