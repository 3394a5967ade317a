import base64
import json
from datetime import date

import pytest

from invoice_engine.core.models.invoice import InvoiceRecord, LineItem
from invoice_engine.core.services import settings as settings_module
from invoice_engine.core.services.drafts import load_draft, save_draft
from invoice_engine.core.services.invoice import (
    InvoiceDataError,
    build_email_payload,
    build_invoice_record,
    validation_issues,
)
from invoice_engine.core.services.settings import EngineSettings, load_settings
from invoice_engine.utils.pdf.renderers.pdf_renderer import render


def test_build_invoice_record_from_form_payload():
    form = {
        "companyName": "Jansen B.V.",
        "name": "Piet",
        "iban": "NL91ABNA0417164300",
        "invoiceNumber": "7",
        "date": "2025-01-01T10:00:00.000Z",
        "paymentTerm": "30_days",
        "products": [{"description": "Consulting", "quantity": "2", "price": "100"}],
        "vatRate": "21",
        "currency": "EUR",
        "notes": "",
        "unrelated": "ignored",
    }

    record = build_invoice_record(form)

    assert record.seller_name == "Jansen B.V."
    assert record.sender_display_name == "Piet"
    assert record.issue_date == date(2025, 1, 1)
    assert record.line_items == (LineItem("Consulting", 2.0, 100.0),)
    assert record.tax_rate_percent == 21
    assert record.notes is None


def test_build_invoice_record_reports_bad_field():
    with pytest.raises(InvoiceDataError) as excinfo:
        build_invoice_record({"products": [{"description": "x", "quantity": "two"}]})
    assert excinfo.value.field == "line_items[0].quantity"


def test_record_is_immutable(sample_invoice):
    with pytest.raises(AttributeError):
        sample_invoice.invoice_number = "other"
    assert isinstance(InvoiceRecord(line_items=[LineItem()]).line_items, tuple)


def test_validation_issues_do_not_raise():
    record = InvoiceRecord(payment_term_code="weekly", tax_rate_percent=6, currency_code="JPY")
    issues = validation_issues(record)

    assert len(issues) == 5
    assert any("weekly" in issue for issue in issues)


def test_validation_issues_empty_for_valid_record(sample_invoice):
    assert validation_issues(sample_invoice) == []


def test_draft_save_and_load(tmp_path, sample_invoice):
    path = save_draft(sample_invoice, tmp_path / "draft.json")
    assert load_draft(path) == sample_invoice


def test_broken_draft_is_discarded(tmp_path):
    path = tmp_path / "draft.json"
    path.write_text(json.dumps({"date": "not a date"}), encoding="utf-8")
    assert load_draft(path) is None
    assert load_draft(tmp_path / "missing.json") is None


def test_email_payload_carries_base64_pdf(sample_invoice):
    document = render(sample_invoice)
    payload = build_email_payload(document, sample_invoice, "client@example.com")

    assert payload["to"] == "client@example.com"
    assert payload["invoiceNumber"] == "2025-001"
    assert base64.b64decode(payload["pdfBase64"]) == document.content


def test_settings_defaults_when_missing(tmp_path):
    assert load_settings(tmp_path / "none.json") == EngineSettings()


def test_settings_from_env_override(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"template": "modern", "qr_enabled": False, "colour": "red"}), encoding="utf-8")
    monkeypatch.setenv(settings_module.SETTINGS_ENV, str(path))

    loaded = load_settings()

    assert loaded.template == "modern"
    assert loaded.qr_enabled is False
    assert loaded.language == "en"
