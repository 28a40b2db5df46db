"""Composite validators that delegate to nested validators and keep full paths."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from docscan.validation.base import Validator
from docscan.validation.models import ValidationIssue

CrossFieldRule = Callable[[Mapping[str, Any]], list[ValidationIssue]]


class ObjectValidator(Validator[Mapping[str, Any]]):
    """Validates a mapping field by field, then applies cross-field rules.

    Every field is checked in one pass so the error lists all failing leaves.
    Absent optional fields are skipped; a present None goes to the field's
    validator, so nullability is decided by the schema. Rules run only when
    every field passed and report at the object's own path.
    """

    def __init__(
        self,
        fields: Mapping[str, Validator[Any]],
        *,
        required: Sequence[str] = (),
        rules: Sequence[CrossFieldRule] = (),
        allow_extra: bool = True,
    ) -> None:
        unknown = set(required) - set(fields)
        if unknown:
            raise ValueError(f"Required fields without validators: {sorted(unknown)}")
        self._fields = dict(fields)
        self._required = tuple(required)
        self._rules = tuple(rules)
        self._allow_extra = allow_extra

    @property
    def fields(self) -> Mapping[str, Validator[Any]]:
        return self._fields

    @property
    def required(self) -> tuple[str, ...]:
        return self._required

    def collect(self, value: object) -> list[ValidationIssue]:
        if not isinstance(value, Mapping):
            return [self.issue("Input should be an object", code="object_type", value=value)]

        issues: list[ValidationIssue] = []
        for field_name, validator in self._fields.items():
            if field_name not in value:
                if field_name in self._required:
                    issues.append(self._missing(field_name))
                continue
            nested = validator.collect(value[field_name])
            issues.extend(self.propagate(nested, field_name, validator))

        if not self._allow_extra:
            for key in value:
                if key not in self._fields:
                    issues.append(
                        self.issue(
                            f"Unrecognized field '{key}'",
                            code="unrecognized_key",
                            value=value[key],
                            path=(key,),
                        )
                    )

        if issues:
            return issues
        for rule in self._rules:
            issues.extend(rule(value))
        return issues

    def _missing(self, field_name: str) -> ValidationIssue:
        return self.issue("Field required", code="required", value=None, path=(field_name,))


class ListValidator(Validator[Sequence[Any]]):
    """Validates every item; item issues are prefixed with the item index."""

    def __init__(
        self,
        items: Validator[Any],
        *,
        min_items: int | None = None,
        max_items: int | None = None,
    ) -> None:
        self._items = items
        self._min_items = min_items
        self._max_items = max_items

    def collect(self, value: object) -> list[ValidationIssue]:
        if not isinstance(value, (list, tuple)):
            return [self.issue("Input should be a list", code="list_type", value=value)]

        issues: list[ValidationIssue] = []
        if self._min_items is not None and len(value) < self._min_items:
            issues.append(
                self.issue(
                    f"List should have at least {self._min_items} item(s)",
                    code="too_short",
                    value=value,
                    min_length=self._min_items,
                )
            )
        if self._max_items is not None and len(value) > self._max_items:
            issues.append(
                self.issue(
                    f"List should have at most {self._max_items} item(s)",
                    code="too_long",
                    value=value,
                    max_length=self._max_items,
                )
            )
        for index, item in enumerate(value):
            issues.extend(self.propagate(self._items.collect(item), index, self._items))
        return issues


class NullableValidator(Validator[Any]):
    """Accepts None, otherwise defers to the wrapped validator at the same path."""

    def __init__(self, inner: Validator[Any]) -> None:
        self._inner = inner

    @property
    def name(self) -> str:
        return self._inner.name

    def collect(self, value: object) -> list[ValidationIssue]:
        if value is None:
            return []
        return self._inner.collect(value)


def field_rule(
    message: str,
    predicate: Callable[[Mapping[str, Any]], bool],
    *,
    code: str = "custom",
    fields: Sequence[str] = (),
) -> CrossFieldRule:
    """Build a cross-field rule that reports `message` when `predicate` is false.

    The issue is attached at the object's path; `fields` lists the involved
    field names in the issue metadata.
    """

    def rule(value: Mapping[str, Any]) -> list[ValidationIssue]:
        if predicate(value):
            return []
        return [
            ValidationIssue(
                message=message,
                code=code,
                invalid_value={name: value.get(name) for name in fields} or dict(value),
                metadata={"validator": "CrossFieldRule", "fields": tuple(fields)},
            )
        ]

    return rule
