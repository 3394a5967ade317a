"""
User-facing strings for the rendered document.
The renderer receives a resolver (or a plain mapping) instead of reading any process-wide language setting.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Dict, Mapping, Union

logger = logging.getLogger(__name__)

LABELS_PATH = Path(__file__).resolve().parents[2] / "data" / "labels.json"

FALLBACK_LANGUAGE = "en"

Resolver = Callable[[str], str]
LabelSource = Union[Mapping[str, str], Resolver, None]

DEFAULT_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "invoice.title": "INVOICE",
        "seller.registration": "CoC",
        "seller.tax_id": "VAT",
        "seller.iban": "IBAN",
        "meta.number": "Invoice number",
        "meta.issue_date": "Invoice date",
        "meta.due_date": "Due date",
        "meta.payment_term": "Payment term",
        "table.description": "Description",
        "table.quantity": "Quantity",
        "table.unit_price": "Price",
        "table.total": "Total",
        "table.continued": "Continued",
        "totals.subtotal": "Subtotal",
        "totals.tax": "VAT {rate}%",
        "totals.total": "Total",
        "notes.title": "Notes",
        "qr.caption": "Scan to pay",
        "footer.text": "Please pay the total amount before the due date, quoting the invoice number.",
        "footer.page": "Page {page} of {pages}",
        "filename.prefix": "invoice",
        "filename.placeholder": "unnumbered",
        "format.decimal": ".",
        "format.thousands": ",",
        "format.date": "%d-%m-%Y",
        "payment_terms.7_days": "7 days",
        "payment_terms.14_days": "14 days",
        "payment_terms.30_days": "30 days",
        "payment_terms.net_15": "Net 15",
        "payment_terms.net_60": "Net 60",
    },
    "nl": {
        "invoice.title": "FACTUUR",
        "seller.registration": "KvK",
        "seller.tax_id": "BTW",
        "seller.iban": "IBAN",
        "meta.number": "Factuurnummer",
        "meta.issue_date": "Factuurdatum",
        "meta.due_date": "Vervaldatum",
        "meta.payment_term": "Betalingstermijn",
        "table.description": "Omschrijving",
        "table.quantity": "Aantal",
        "table.unit_price": "Prijs",
        "table.total": "Totaal",
        "table.continued": "Vervolg",
        "totals.subtotal": "Subtotaal",
        "totals.tax": "BTW {rate}%",
        "totals.total": "Totaal",
        "notes.title": "Opmerkingen",
        "qr.caption": "Scan om te betalen",
        "footer.text": "Gelieve het totaalbedrag voor de vervaldatum over te maken onder vermelding van het factuurnummer.",
        "footer.page": "Pagina {page} van {pages}",
        "filename.prefix": "factuur",
        "filename.placeholder": "ongenummerd",
        "format.decimal": ",",
        "format.thousands": ".",
        "format.date": "%d-%m-%Y",
        "payment_terms.7_days": "7 dagen",
        "payment_terms.14_days": "14 dagen",
        "payment_terms.30_days": "30 dagen",
        "payment_terms.net_15": "Netto 15 dagen",
        "payment_terms.net_60": "Netto 60 dagen",
    },
}


def load_labels(path: Path | None = None) -> Dict[str, Dict[str, str]]:
    """
    Default label sets merged with overrides from `data/labels.json` ({"lang": {"key": "text"}}).
    An unreadable override file is logged and ignored.
    """
    target = path or LABELS_PATH
    merged = {lang: dict(values) for lang, values in DEFAULT_LABELS.items()}
    if not target.exists():
        return merged
    try:
        overrides = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring label overrides in %s: %s", target, exc)
        return merged
    if not isinstance(overrides, dict):
        logger.warning("Ignoring label overrides in %s: expected an object", target)
        return merged
    for lang, values in overrides.items():
        if isinstance(values, dict):
            merged.setdefault(str(lang), {}).update({str(k): str(v) for k, v in values.items()})
    return merged


def fallback_chain(language: str | None) -> list[str]:
    chain: list[str] = []
    if language:
        chain.append(language)
        base = language.split("-")[0].split("_")[0]
        if base not in chain:
            chain.append(base)
    if FALLBACK_LANGUAGE not in chain:
        chain.append(FALLBACK_LANGUAGE)
    return chain


def make_resolver(language: str | None = None, label_sets: Mapping[str, Mapping[str, str]] | None = None) -> Resolver:
    """Resolver walking requested language -> base language -> English -> the key itself."""
    sets = label_sets if label_sets is not None else DEFAULT_LABELS
    chain = [sets[lang] for lang in fallback_chain(language) if lang in sets]

    def resolve(key: str) -> str:
        for values in chain:
            if key in values:
                return values[key]
        return key

    return resolve


def as_resolver(labels: LabelSource) -> Resolver:
    """Accept a resolver, a pre-resolved mapping (English fills the gaps) or None (English)."""
    if labels is None:
        return make_resolver(FALLBACK_LANGUAGE)
    if callable(labels):
        return labels
    english = make_resolver(FALLBACK_LANGUAGE)
    values = dict(labels)

    def resolve(key: str) -> str:
        if key in values:
            return str(values[key])
        return english(key)

    return resolve
