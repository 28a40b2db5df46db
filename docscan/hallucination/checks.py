from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from docscan.hallucination.source import SourceText, parse_amounts, parse_iso_date
from docscan.validation.models import PathSegment

WILDCARD = "*"


class FieldCheck(ABC):
    """Traces the value at `path` back to the source text.

    Paths are dotted; a `*` segment expands over every item of a list.
    """

    name: ClassVar[str]

    def __init__(self, path: str) -> None:
        self.path: tuple[str, ...] = tuple(path.split("."))

    @abstractmethod
    def supports(self, value: Any, source: SourceText) -> bool:
        """Return True when `value` can be found in `source`."""

    def resolve(self, data: Any) -> Iterator[tuple[tuple[PathSegment, ...], Any]]:
        """Yield (concrete path, value) for every location matched by the path."""
        yield from resolve_path(data, self.path, ())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({'.'.join(self.path)!r})"


class TextCheck(FieldCheck):
    name = "text"

    def supports(self, value: Any, source: SourceText) -> bool:
        return source.contains_text(str(value))


class DigitsCheck(FieldCheck):
    """Compares digits only, so `12-345` in the text supports `12345`."""

    name = "digits"

    def supports(self, value: Any, source: SourceText) -> bool:
        return source.contains_digits(str(value))


class AmountCheck(FieldCheck):
    """Tolerant numeric match to the cent: `$1,234.56` supports 1234.56.

    Zero amounts are always supported.
    """

    name = "amount"

    def supports(self, value: Any, source: SourceText) -> bool:
        amounts = as_amounts(value)
        if not amounts:
            return source.contains_text(str(value))
        if any(amount == 0 for amount in amounts):
            return True
        return not amounts.isdisjoint(source.amounts)


class DateCheck(FieldCheck):
    """Matches an ISO date against dates written in common formats."""

    name = "date"

    def supports(self, value: Any, source: SourceText) -> bool:
        parsed = parse_iso_date(str(value))
        if parsed is None:
            return source.contains_text(str(value))
        return parsed in source.dates


def as_amounts(value: Any) -> set[Decimal]:
    if isinstance(value, bool):
        return set()
    if isinstance(value, (int, float)):
        try:
            return {Decimal(str(value)).quantize(Decimal("0.01"))}
        except InvalidOperation:
            return set()
    return parse_amounts(str(value))


def resolve_path(
    data: Any,
    remaining: Sequence[str],
    prefix: tuple[PathSegment, ...] = (),
) -> Iterator[tuple[tuple[PathSegment, ...], Any]]:
    """Yield (concrete path, value) for every location matched by `remaining`."""
    if not remaining:
        yield prefix, data
        return
    head, rest = remaining[0], remaining[1:]
    if head == WILDCARD:
        if isinstance(data, (list, tuple)):
            for index, item in enumerate(data):
                yield from resolve_path(item, rest, (*prefix, index))
        return
    if isinstance(data, Mapping) and head in data:
        yield from resolve_path(data[head], rest, (*prefix, head))
