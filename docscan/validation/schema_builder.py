from collections.abc import Mapping
from typing import Any

from docscan.validation.base import Validator
from docscan.validation.composite import ListValidator, NullableValidator, ObjectValidator
from docscan.validation.leaves import (
    AnyValidator,
    BooleanValidator,
    DateTimeValidator,
    IntegerValidator,
    NumberValidator,
    StringValidator,
)


def validator_from_schema(definition: Mapping[str, Any]) -> Validator[Any]:
    """Build a validator tree from a JSON-Schema-like descriptor.

    Supports the subset used by the document schemas: type (optionally
    nullable), properties, required, additionalProperties, items, enum,
    pattern, format, minimum, maximum, exclusiveMinimum, minLength,
    maxLength, minItems and maxItems.

    Raises:
        ValueError: if the descriptor uses an unsupported type.
    """
    declared = definition.get("type")
    if isinstance(declared, list):
        types = [t for t in declared if t != "null"]
        nullable = len(types) < len(declared)
        if len(types) != 1:
            return AnyValidator()
        inner = _build(types[0], definition)
        return NullableValidator(inner) if nullable else inner
    if declared is None:
        if "properties" in definition:
            return _build("object", definition)
        return AnyValidator()
    return _build(declared, definition)


def _build(type_name: str, definition: Mapping[str, Any]) -> Validator[Any]:
    if type_name == "object":
        properties = definition.get("properties", {})
        return ObjectValidator(
            {name: validator_from_schema(sub) for name, sub in properties.items()},
            required=definition.get("required", ()),
            allow_extra=definition.get("additionalProperties", True) is not False,
        )
    if type_name == "array":
        return ListValidator(
            validator_from_schema(definition.get("items", {})),
            min_items=definition.get("minItems"),
            max_items=definition.get("maxItems"),
        )
    if type_name == "string":
        schema_format = definition.get("format")
        if schema_format in ("date-time", "date"):
            return DateTimeValidator(date_only=schema_format == "date")
        return StringValidator(
            min_length=definition.get("minLength"),
            max_length=definition.get("maxLength"),
            pattern=definition.get("pattern"),
            choices=definition.get("enum"),
        )
    if type_name == "number":
        return NumberValidator(
            minimum=definition.get("minimum"),
            maximum=definition.get("maximum"),
            exclusive_minimum=definition.get("exclusiveMinimum"),
        )
    if type_name == "integer":
        return IntegerValidator(
            minimum=definition.get("minimum"),
            maximum=definition.get("maximum"),
            exclusive_minimum=definition.get("exclusiveMinimum"),
        )
    if type_name == "boolean":
        return BooleanValidator()
    raise ValueError(f"Unsupported schema type '{type_name}'")
