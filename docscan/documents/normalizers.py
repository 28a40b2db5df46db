"""Per-kind cleanup applied to extracted JSON before validation.

Normalizers never modify their input; they return a new dict.
"""

import copy
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

DATE_FORMATS: list[str] = [
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%m/%d/%y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
]

DATETIME_FORMATS: list[str] = [
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%d/%m/%Y %H:%M",
    "%d.%m.%Y %H:%M",
    "%Y-%m-%d %I:%M %p",
    "%b %d, %Y %I:%M %p",
    *DATE_FORMATS,
]


def canonical_date(value: str) -> str | None:
    """Return `value` as YYYY-MM-DD, or None when no known format matches."""
    parsed = _parse(value, DATE_FORMATS)
    return parsed.date().isoformat() if parsed is not None else None


def canonical_datetime(value: str) -> str | None:
    """Return `value` as an ISO 8601 date-time, or None when unparseable."""
    parsed = _parse(value, DATETIME_FORMATS)
    return parsed.isoformat() if parsed is not None else None


def parse_amount(value: Any) -> float | None:
    """Coerce "$1,234.56"-style strings to a float; None when not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(Decimal(str(value).strip().replace(",", "").replace("$", "")))
    except InvalidOperation:
        return None


def normalize_check(data: Mapping[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(dict(data))
    if isinstance(result.get("date"), str):
        result["date"] = canonical_date(result["date"]) or result["date"]
    if isinstance(result.get("amount"), str):
        amount = parse_amount(result["amount"])
        if amount is not None:
            result["amount"] = amount
    if isinstance(result.get("checkNumber"), int) and not isinstance(
        result["checkNumber"], bool
    ):
        result["checkNumber"] = str(result["checkNumber"])
    return result


def normalize_receipt(data: Mapping[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(dict(data))
    if isinstance(result.get("currency"), str):
        result["currency"] = result["currency"].strip().upper()
    metadata = result.get("metadata")
    if isinstance(metadata, dict) and isinstance(metadata.get("currency"), str):
        metadata["currency"] = metadata["currency"].strip().upper()
    if isinstance(result.get("timestamp"), str):
        result["timestamp"] = canonical_datetime(result["timestamp"]) or result["timestamp"]
    return result


def _parse(value: str, formats: list[str]) -> datetime | None:
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
