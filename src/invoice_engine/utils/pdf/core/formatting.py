"""
Display formatting for amounts, quantities and dates.
Numbers are rounded here and only here; the stored values keep full precision.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext

from invoice_engine.core.models.invoice import CURRENCY_SYMBOLS
from invoice_engine.core.services.labels import Resolver

_CENT = Decimal("0.01")
# float noise below this is dropped before rounding half-up (303.10499999999996 -> 303.105)
_NOISE = Decimal("1e-9")


@dataclass(frozen=True)
class NumberFormat:
    decimal: str = "."
    thousands: str = ","
    date_pattern: str = "%d-%m-%Y"


def number_format(resolve: Resolver) -> NumberFormat:
    return NumberFormat(
        decimal=resolve("format.decimal"),
        thousands=resolve("format.thousands"),
        date_pattern=resolve("format.date"),
    )


def round_for_display(value: float) -> Decimal:
    """
    Half-up to cents. NaN and infinities come back as they are; non-numeric input counts as 0.00.
    """
    try:
        exact = Decimal(float(value))
    except (TypeError, ValueError):
        return Decimal("0.00")
    if not exact.is_finite():
        return exact
    with localcontext() as ctx:
        # room for every digit of the largest float plus the noise quantum
        ctx.prec = 400
        rounded = exact.quantize(_NOISE).quantize(_CENT, rounding=ROUND_HALF_UP)
    return rounded if rounded else Decimal("0.00")


def _swap_separators(text: str, fmt: NumberFormat) -> str:
    return text.replace(",", "\0").replace(".", fmt.decimal).replace("\0", fmt.thousands)


def format_amount(value: float, fmt: NumberFormat = NumberFormat()) -> str:
    rounded = round_for_display(value)
    if not rounded.is_finite():
        return str(value)
    return _swap_separators(f"{rounded:,.2f}", fmt)


def currency_symbol(currency_code: str) -> str:
    """Known codes map to their symbol; anything else prints as given."""
    return CURRENCY_SYMBOLS.get(currency_code, str(currency_code or ""))


def format_currency(value: float, currency_code: str = "EUR", fmt: NumberFormat = NumberFormat()) -> str:
    return f"{currency_symbol(currency_code)} {format_amount(value, fmt)}"


def format_quantity(value: float, fmt: NumberFormat = NumberFormat()) -> str:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return str(value)
    if numeric.is_integer():
        return str(int(numeric))
    return _swap_separators(f"{numeric:,.2f}", fmt)


def format_rate(rate: float) -> str:
    try:
        return f"{float(rate):g}"
    except (TypeError, ValueError):
        return str(rate)


def format_date(value: date, fmt: NumberFormat = NumberFormat()) -> str:
    return value.strftime(fmt.date_pattern)
