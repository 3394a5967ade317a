from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Mapping

from invoice_engine.core.models.invoice import (
    SUPPORTED_CURRENCIES,
    SUPPORTED_TAX_RATES,
    InvoiceRecord,
    LineItem,
)
from invoice_engine.core.models.payment_term import get_payment_term

# form field name -> InvoiceRecord attribute
FORM_FIELDS = {
    "companyName": "seller_name",
    "name": "sender_display_name",
    "address": "address",
    "cocNumber": "business_registration_id",
    "vatNumber": "tax_id",
    "iban": "bank_account",
    "invoiceNumber": "invoice_number",
    "date": "issue_date",
    "paymentTerm": "payment_term_code",
    "products": "line_items",
    "vatRate": "tax_rate_percent",
    "currency": "currency_code",
    "notes": "notes",
}


class InvoiceDataError(ValueError):
    """Form payload field that cannot be coerced into an InvoiceRecord."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


def _parse_date(value: Any, field: str = "issue_date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        # accepts plain ISO dates and JS `toISOString()` values
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise InvoiceDataError(field, f"invalid date {value!r}") from exc


def _parse_number(value: Any, field: str) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvoiceDataError(field, f"not a number: {value!r}") from exc


def _parse_line_items(raw: Iterable[Any]) -> tuple[LineItem, ...]:
    items: list[LineItem] = []
    for idx, entry in enumerate(raw):
        if isinstance(entry, LineItem):
            items.append(entry)
            continue
        if not isinstance(entry, Mapping):
            raise InvoiceDataError(f"line_items[{idx}]", "expected an object")
        items.append(
            LineItem(
                description=str(entry.get("description") or ""),
                quantity=_parse_number(entry.get("quantity", 1), f"line_items[{idx}].quantity"),
                unit_price=_parse_number(entry.get("unit_price", entry.get("price")), f"line_items[{idx}].unit_price"),
            )
        )
    return tuple(items)


def build_invoice_record(form: Mapping[str, Any]) -> InvoiceRecord:
    """
    Coerce a form payload into an InvoiceRecord.
    Accepts the form's camelCase names as well as the record's own attribute names.
    """
    values: dict[str, Any] = {}
    for key, raw in form.items():
        attr = FORM_FIELDS.get(key, key)
        if attr in InvoiceRecord.__dataclass_fields__:
            values[attr] = raw

    if "issue_date" in values:
        values["issue_date"] = _parse_date(values["issue_date"])
    if "line_items" in values:
        values["line_items"] = _parse_line_items(values["line_items"] or [])
    if "tax_rate_percent" in values:
        rate = _parse_number(values["tax_rate_percent"], "tax_rate_percent")
        values["tax_rate_percent"] = int(rate) if rate.is_integer() else rate
    for key in (
        "seller_name",
        "sender_display_name",
        "address",
        "business_registration_id",
        "tax_id",
        "bank_account",
        "invoice_number",
        "payment_term_code",
        "currency_code",
    ):
        if key in values:
            values[key] = "" if values[key] is None else str(values[key])
    if "notes" in values:
        values["notes"] = str(values["notes"]) if values["notes"] else None
    return InvoiceRecord(**values)


def invoice_to_dict(invoice: InvoiceRecord) -> dict:
    """JSON-ready form payload (camelCase, like the form sends it)."""
    return {
        "companyName": invoice.seller_name,
        "name": invoice.sender_display_name,
        "address": invoice.address,
        "cocNumber": invoice.business_registration_id,
        "vatNumber": invoice.tax_id,
        "iban": invoice.bank_account,
        "invoiceNumber": invoice.invoice_number,
        "date": invoice.issue_date.isoformat(),
        "paymentTerm": invoice.payment_term_code,
        "products": [
            {"description": item.description, "quantity": item.quantity, "price": item.unit_price}
            for item in invoice.line_items
        ],
        "vatRate": invoice.tax_rate_percent,
        "currency": invoice.currency_code,
        "notes": invoice.notes or "",
    }


def validation_issues(invoice: InvoiceRecord) -> list[str]:
    """
    Problems the form layer may want to show before rendering.
    The calculator and renderer accept the record either way.
    """
    issues: list[str] = []
    if not invoice.line_items:
        issues.append("at least one line item is required")
    if get_payment_term(invoice.payment_term_code) is None:
        issues.append(f"unknown payment term: {invoice.payment_term_code!r}")
    if invoice.tax_rate_percent not in SUPPORTED_TAX_RATES:
        issues.append(f"unsupported tax rate: {invoice.tax_rate_percent!r}")
    if invoice.currency_code not in SUPPORTED_CURRENCIES:
        issues.append(f"unsupported currency: {invoice.currency_code!r}")
    if not invoice.seller_name.strip():
        issues.append("seller name is empty")
    return issues


def build_email_payload(document, invoice: InvoiceRecord, recipient: str) -> dict:
    """
    Request body for the mail relay: the rendered PDF travels base64-encoded.
    `document` is a RenderedDocument.
    """
    return {
        "to": recipient,
        "invoiceNumber": invoice.invoice_number,
        "pdfBase64": document.to_base64(),
        "name": invoice.sender_display_name,
    }
