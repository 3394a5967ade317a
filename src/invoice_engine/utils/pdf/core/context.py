from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from invoice_engine.core.calculations.totals_calculator import DerivedTotals
from invoice_engine.core.models.invoice import InvoiceRecord
from invoice_engine.core.services.labels import Resolver
from invoice_engine.utils.pdf.core.fonts import FontFamily
from invoice_engine.utils.pdf.core.formatting import NumberFormat, format_currency
from invoice_engine.utils.pdf.templates import TemplateConfig


@dataclass(frozen=True)
class RenderContext:
    """Everything a section needs for one render call; built fresh per call."""

    invoice: InvoiceRecord
    totals: DerivedTotals
    due_date: date
    template: TemplateConfig
    family: FontFamily
    resolve: Resolver
    fmt: NumberFormat

    def money(self, value: float) -> str:
        return format_currency(value, self.invoice.currency_code, self.fmt)

    def label(self, key: str, **values: str) -> str:
        text = self.resolve(key)
        for name, value in values.items():
            text = text.replace("{" + name + "}", value)
        return text
