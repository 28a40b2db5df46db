"""Normalized views of OCR text used to trace extracted values."""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from functools import cached_property

_CENTS = Decimal("0.01")
_DIGIT_RUN = re.compile(r"\d[\d \-]*\d|\d")
# money-shaped only: a currency symbol, two decimals, or thousands grouping
_MONEY_TOKEN = re.compile(
    r"(?<![\d.,])"
    r"(?:[$€£]\s?\d+(?:[.,]\d+)*"
    r"|\d{1,3}(?:[,.]\d{3})+(?:[.,]\d{2})?"
    r"|\d+[.,]\d{2})"
    r"(?!\d)"
)
_NUMERIC_DATE = re.compile(r"\b(\d{1,4})[/.\-](\d{1,2})[/.\-](\d{1,4})\b")
_MONTH_DAY_YEAR = re.compile(
    r"\b([A-Za-z]{3,9})\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b"
)
_DAY_MONTH_YEAR = re.compile(
    r"\b(\d{1,2})(?:st|nd|rd|th)?\s+([A-Za-z]{3,9})\.?,?\s+(\d{4})\b"
)
_MONTHS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}


def fold_text(value: str) -> str:
    """Case-fold and collapse whitespace."""
    return " ".join(value.casefold().split())


def digits_only(value: str) -> str:
    return "".join(ch for ch in value if ch.isdigit())


def parse_amounts(token: str) -> set[Decimal]:
    """Readings of a numeric token in both 1,234.56 and 1.234,56 notation."""
    token = token.strip().lstrip("$€£").strip().rstrip(".,")
    readings: set[Decimal] = set()
    for candidate in (token.replace(",", ""), token.replace(".", "").replace(",", ".")):
        try:
            readings.add(Decimal(candidate).quantize(_CENTS))
        except InvalidOperation:
            continue
    return readings


def parse_iso_date(value: str) -> date | None:
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None


class SourceText:
    """OCR text plus lazily built indexes for tolerant matching."""

    def __init__(self, text: str) -> None:
        self.raw = text

    @cached_property
    def folded(self) -> str:
        return fold_text(self.raw)

    @cached_property
    def digit_runs(self) -> tuple[str, ...]:
        return tuple(digits_only(run) for run in _DIGIT_RUN.findall(self.raw))

    @cached_property
    def amounts(self) -> frozenset[Decimal]:
        found: set[Decimal] = set()
        without_dates = _NUMERIC_DATE.sub(" ", self.raw)
        for token in _MONEY_TOKEN.findall(without_dates):
            found |= parse_amounts(token)
        return frozenset(found)

    @cached_property
    def dates(self) -> frozenset[date]:
        found: set[date] = set()
        for first, second, third in _NUMERIC_DATE.findall(self.raw):
            if len(first) == 4:
                _add_date(found, int(first), int(second), int(third))
                continue
            year = _full_year(third)
            _add_date(found, year, int(first), int(second))
            _add_date(found, year, int(second), int(first))
        for month_name, day, year in _MONTH_DAY_YEAR.findall(self.raw):
            month = _MONTHS.get(month_name[:3].lower())
            if month:
                _add_date(found, int(year), month, int(day))
        for day, month_name, year in _DAY_MONTH_YEAR.findall(self.raw):
            month = _MONTHS.get(month_name[:3].lower())
            if month:
                _add_date(found, int(year), month, int(day))
        return frozenset(found)

    def contains_text(self, value: str) -> bool:
        folded = fold_text(value)
        return bool(folded) and folded in self.folded

    def contains_digits(self, value: str) -> bool:
        digits = digits_only(value)
        return bool(digits) and any(digits in run for run in self.digit_runs)


def _full_year(value: str) -> int:
    year = int(value)
    return 2000 + year if year < 100 else year


def _add_date(found: set[date], year: int, month: int, day: int) -> None:
    try:
        found.add(date(year, month, day))
    except ValueError:
        pass
