from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

SUPPORTED_TAX_RATES: Tuple[int, ...] = (9, 21)
SUPPORTED_CURRENCIES: Tuple[str, ...] = ("EUR", "USD", "GBP")

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


@dataclass(frozen=True)
class LineItem:
    """One billable row on an invoice."""

    description: str = ""
    quantity: float = 1
    unit_price: float = 0.0


@dataclass(frozen=True)
class InvoiceRecord:
    """
    Immutable invoice data handed to the calculator and the renderer.
    Unsupported rates/currencies are kept as given; callers decide what to reject.
    """

    seller_name: str = ""
    sender_display_name: str = ""
    address: str = ""
    business_registration_id: str = ""  # KvK / chamber of commerce
    tax_id: str = ""  # BTW / VAT number
    bank_account: str = ""  # IBAN
    invoice_number: str = ""
    issue_date: date = field(default_factory=lambda: date(1970, 1, 1))
    payment_term_code: str = "14_days"
    line_items: Tuple[LineItem, ...] = ()
    tax_rate_percent: float = 21
    currency_code: str = "EUR"
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        # lists from the form layer are frozen into tuples
        if not isinstance(self.line_items, tuple):
            object.__setattr__(self, "line_items", tuple(self.line_items))
