"""
Invoice arithmetic: totals from line items and due dates from payment terms.
Values are never rounded here; rounding happens only when amounts are formatted for display.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional

from invoice_engine.core.models.invoice import LineItem
from invoice_engine.core.models.payment_term import get_payment_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedTotals:
    subtotal: float
    tax_amount: float
    total: float


def line_total(item: LineItem | Mapping) -> float:
    """quantity x unit price; negative values pass through unchanged."""
    if isinstance(item, Mapping):
        quantity = item.get("quantity", 0)
        unit_price = item.get("unit_price", item.get("price", 0))
        return float(quantity) * float(unit_price)
    return float(item.quantity) * float(item.unit_price)


def calculate_totals(line_items: Iterable[LineItem | Mapping], tax_rate_percent: float) -> DerivedTotals:
    subtotal = 0.0
    for item in line_items:
        subtotal += line_total(item)
    tax_amount = subtotal * float(tax_rate_percent) / 100
    return DerivedTotals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)


def calculate_due_date(issue_date: date, payment_term_code: Optional[str], today: Optional[date] = None) -> date:
    """
    issue_date + term days (calendar days).
    Unknown or missing codes fall back to `today` (wall clock when not given) instead of raising.
    """
    term = get_payment_term(payment_term_code)
    if term is None:
        logger.warning("Unknown payment term %r, falling back to current date", payment_term_code)
        return today if today is not None else date.today()
    return issue_date + timedelta(days=term.days)
