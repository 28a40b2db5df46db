from collections.abc import Mapping
from typing import Any, ClassVar

from docscan.hallucination.base import FieldTraceDetector
from docscan.hallucination.checks import AmountCheck, DateCheck, DigitsCheck, FieldCheck, TextCheck
from docscan.hallucination.suspicion import (
    PlaceholderCheck,
    SuspicionRule,
    SuspicionScorer,
    total_amount,
)

GENERIC_MERCHANT_NAMES = (
    "Store",
    "Market",
    "Supermarket",
    "Shop",
    "Restaurant",
    "ABC Store",
    "XYZ Market",
)


class CheckHallucinationDetector(FieldTraceDetector):
    CHECKS: ClassVar[tuple[FieldCheck, ...]] = (
        DigitsCheck("checkNumber"),
        TextCheck("payee"),
        TextCheck("payer"),
        AmountCheck("amount"),
        DateCheck("date"),
        TextCheck("bankName"),
        TextCheck("memo"),
        DigitsCheck("routingNumber"),
        DigitsCheck("accountNumber"),
    )
    PLACEHOLDERS: ClassVar[tuple[PlaceholderCheck, ...]] = (
        PlaceholderCheck("checkNumber", ("1234", "5678", "0000", "1001", "100", "123")),
        PlaceholderCheck(
            "payee",
            ("John Doe", "Jane Doe", "John Smith", "Jane Smith", "ABC Company", "XYZ Corp"),
            partial=True,
        ),
        PlaceholderCheck(
            "payer", ("John Doe", "Jane Doe", "John Smith", "Jane Smith"), partial=True
        ),
        PlaceholderCheck("amount", (100, 150.75, 200, 500, 1000, 50, 25), numeric=True),
        PlaceholderCheck("date", ("2023-10-05", "2024-01-05", "2023-01-01", "2024-01-01")),
        PlaceholderCheck(
            "bankName", ("Bank", "First Bank", "National Bank", "City Bank"), partial=True
        ),
        PlaceholderCheck("routingNumber", ("123456789", "000000000", "111111111")),
    )
    RULES: ClassVar[tuple[SuspicionRule, ...]] = (
        SuspicionRule(
            "Check number, payee and amount form a stock example",
            lambda data: data.get("checkNumber") == "1234"
            and data.get("payee") == "John Doe"
            and total_amount(data, "amount") == 100,
            weight=2,
        ),
        SuspicionRule(
            "Amount is set but neither payee nor payer was extracted",
            lambda data: total_amount(data, "amount") > 0
            and not data.get("payee")
            and not data.get("payer"),
        ),
    )

    def __init__(self) -> None:
        super().__init__(self.CHECKS, SuspicionScorer(self.PLACEHOLDERS, self.RULES))


class ReceiptHallucinationDetector(FieldTraceDetector):
    CHECKS: ClassVar[tuple[FieldCheck, ...]] = (
        TextCheck("merchant.name"),
        DigitsCheck("receiptNumber"),
        DateCheck("timestamp"),
        AmountCheck("totals.subtotal"),
        AmountCheck("totals.tax"),
        AmountCheck("totals.tip"),
        AmountCheck("totals.discount"),
        AmountCheck("totals.total"),
        TextCheck("items.*.description"),
        AmountCheck("items.*.totalPrice"),
    )
    PLACEHOLDERS: ClassVar[tuple[PlaceholderCheck, ...]] = (
        PlaceholderCheck("merchant.name", GENERIC_MERCHANT_NAMES, partial=True),
        PlaceholderCheck(
            "totals.total", (0, 10, 15.99, 20, 25, 50, 100, 5.99, 12.99), numeric=True
        ),
        PlaceholderCheck("receiptNumber", ("123", "1234", "001", "100", "R001", "TXN123")),
        PlaceholderCheck(
            "merchant.address", ("123 Main St", "456 Oak Ave", "Address", "Street"), partial=True
        ),
        PlaceholderCheck(
            "items.*.description", ("Item", "Product", "Food", "Drink", "Service"), partial=True
        ),
    )
    RULES: ClassVar[tuple[SuspicionRule, ...]] = (
        SuspicionRule(
            "Total is set but no merchant name was extracted",
            lambda data: not _merchant(data).get("name") and total_amount(data, "totals.total") > 0,
        ),
        SuspicionRule(
            "Currency is set without a specific merchant",
            lambda data: isinstance(data.get("currency"), str)
            and len(data["currency"]) == 3
            and _merchant(data).get("name") in (None, "", *GENERIC_MERCHANT_NAMES),
        ),
        SuspicionRule(
            "At most one line item for a total above 20",
            lambda data: isinstance(data.get("items"), list)
            and len(data["items"]) <= 1
            and total_amount(data, "totals.total") > 20,
        ),
        SuspicionRule(
            "Merchant, total and single item form a stock example",
            lambda data: _merchant(data).get("name") == "Store"
            and total_amount(data, "totals.total") == 10
            and isinstance(data.get("items"), list)
            and len(data["items"]) == 1,
            weight=2,
        ),
        SuspicionRule(
            "Total is set but no address, phone or items were extracted",
            lambda data: total_amount(data, "totals.total") > 0
            and not _merchant(data).get("address")
            and not _merchant(data).get("phone")
            and not data.get("items"),
        ),
        SuspicionRule(
            "Merchant and total are set but the timestamp is missing",
            lambda data: not data.get("timestamp")
            and bool(_merchant(data).get("name"))
            and total_amount(data, "totals.total") > 0,
        ),
    )

    def __init__(self) -> None:
        super().__init__(self.CHECKS, SuspicionScorer(self.PLACEHOLDERS, self.RULES))


def _merchant(data: Mapping[str, Any]) -> Mapping[str, Any]:
    merchant = data.get("merchant")
    return merchant if isinstance(merchant, Mapping) else {}
