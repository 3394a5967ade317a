import base64
import re
from dataclasses import replace
from datetime import date

import pytest

from invoice_engine.core.models.invoice import InvoiceRecord, LineItem
from invoice_engine.core.services.labels import make_resolver
from invoice_engine.utils.pdf.core.fonts import REGULAR, get_family, text_width
from invoice_engine.utils.pdf.core.layout_common import MARGIN_X, QR_X
from invoice_engine.utils.pdf.exports.invoice import export_invoice_pdf
from invoice_engine.utils.pdf.renderers.pdf_renderer import render


def test_pdf_structure(sample_invoice):
    content = render(sample_invoice).content

    assert content.startswith(b"%PDF-1.4\n")
    assert content.rstrip().endswith(b"%%EOF")
    offset = int(re.search(rb"startxref\n(\d+)\n", content).group(1))
    assert content[offset : offset + 4] == b"xref"


def test_totals_and_rows_are_printed(sample_invoice, pdf_text):
    texts = pdf_text(render(sample_invoice).content)

    assert "€ 303.11" in texts
    assert "€ 52.61" in texts
    assert "€ 250.50" in texts
    assert texts.index("Consulting") < texts.index("Travel")


def test_row_order_follows_input(sample_invoice, pdf_text):
    reversed_invoice = replace(sample_invoice, line_items=tuple(reversed(sample_invoice.line_items)))
    texts = pdf_text(render(reversed_invoice).content)
    assert texts.index("Travel") < texts.index("Consulting")


def test_rendering_is_deterministic(sample_invoice, png_logo):
    first = render(sample_invoice, logo_image=png_logo, template="modern")
    second = render(sample_invoice, logo_image=png_logo, template="modern")
    assert first.content == second.content


def test_currency_symbol_follows_record(sample_invoice, pdf_text):
    texts = pdf_text(render(replace(sample_invoice, currency_code="USD")).content)
    assert "$ 303.11" in texts
    assert "€ 303.11" not in texts


def test_corrupt_logo_is_skipped(sample_invoice, pdf_text):
    document = render(sample_invoice, logo_image=b"not an image")

    assert document.warnings
    assert document.warnings[0].startswith("logo skipped")
    assert b"/XObject" not in document.content
    assert "€ 303.11" in pdf_text(document.content)


def test_logo_is_embedded(sample_invoice, png_logo):
    document = render(sample_invoice, logo_image=png_logo)
    assert b"/Logo Do" in document.content
    assert document.warnings == ()


def test_logo_from_data_url(sample_invoice, png_logo):
    data_url = "data:image/png;base64," + base64.b64encode(png_logo).decode("ascii")
    assert b"/Logo Do" in render(sample_invoice, logo_image=data_url).content


def _title_run(content, pdf_pages):
    return next(run for run in pdf_pages(content)[0] if run.text == "INVOICE")


def test_templates_place_title_differently(sample_invoice, pdf_pages):
    classic = _title_run(render(sample_invoice, template="classic").content, pdf_pages)
    modern = _title_run(render(sample_invoice, template="modern").content, pdf_pages)

    assert classic.x == MARGIN_X
    assert modern.x > 200
    assert classic.size != modern.size


def test_classic_uses_times(sample_invoice):
    assert b"/Times-Roman" in render(sample_invoice, template="classic").content
    assert b"/Helvetica" in render(sample_invoice, template="creative").content


def test_unknown_template_falls_back_to_classic(sample_invoice):
    assert render(sample_invoice, template="neon").content == render(sample_invoice).content


def test_blank_record_renders(pdf_text):
    document = render(InvoiceRecord())

    assert document.content.startswith(b"%PDF")
    assert document.page_count == 1
    assert document.filename == "invoice-unnumbered.pdf"
    assert "€ 0.00" in pdf_text(document.content)


def test_unknown_payment_term_prints_code(sample_invoice, pdf_text):
    record = replace(sample_invoice, payment_term_code="weekly", issue_date=date(2025, 3, 1))
    texts = pdf_text(render(record).content)

    assert "weekly" in texts
    assert texts.count("01-03-2025") == 2


def test_dutch_labels(sample_invoice, pdf_text):
    document = render(sample_invoice, labels=make_resolver("nl"))
    texts = pdf_text(document.content)

    assert "FACTUUR" in texts
    assert "€ 303,11" in texts
    assert document.filename == "factuur-2025-001.pdf"
    assert render(replace(sample_invoice, invoice_number=""), labels=make_resolver("nl")).filename == "factuur-ongenummerd.pdf"


def test_label_mapping_overrides_title(sample_invoice, pdf_text):
    texts = pdf_text(render(sample_invoice, labels={"invoice.title": "RECHNUNG"}).content)
    assert "RECHNUNG" in texts
    assert "Subtotal:" in texts


def test_long_invoice_continues_on_next_pages(sample_invoice, pdf_pages):
    items = tuple(LineItem(f"Item {i:02d}", 1, 10) for i in range(60))
    document = render(replace(sample_invoice, line_items=items))
    pages = pdf_pages(document.content)
    texts = [run.text for page in pages for run in page]

    assert document.page_count >= 2
    assert len(pages) == document.page_count
    assert f"Page 1 of {document.page_count}" in texts
    assert f"Page {document.page_count} of {document.page_count}" in texts
    assert any("Continued" in run.text for run in pages[1])
    descriptions = [text for text in texts if text.startswith("Item ")]
    assert descriptions == [f"Item {i:02d}" for i in range(60)]
    assert "€ 726.00" in texts


def test_notes_stay_left_of_qr(sample_invoice, pdf_pages):
    notes = " ".join(["Payment within the agreed term is appreciated."] * 8)
    document = render(replace(sample_invoice, notes=notes), template="creative")
    family = get_family("helvetica")
    runs = [run for page in pdf_pages(document.content) for run in page if run.size == 9 and run.font == REGULAR]

    assert runs
    for run in runs:
        assert run.x + text_width(run.text, family, run.font, run.size) <= QR_X
    assert "Scan to pay" in [run.text for page in pdf_pages(document.content) for run in page]


def test_qr_can_be_disabled(sample_invoice, pdf_text):
    assert "Scan to pay" in pdf_text(render(sample_invoice).content)
    assert "Scan to pay" not in pdf_text(render(sample_invoice, qr=False).content)


def test_qr_encode_failure_is_reported(sample_invoice, pdf_text):
    document = render(sample_invoice, qr_payload=lambda invoice, totals: "x" * 5000)

    assert any(w.startswith("payment QR skipped") for w in document.warnings)
    assert "Scan to pay" not in pdf_text(document.content)


def test_custom_qr_payload(sample_invoice, pdf_text):
    seen = []

    def payload(invoice, totals):
        seen.append(totals.total)
        return f"https://pay.example.com/{invoice.invoice_number}"

    texts = pdf_text(render(replace(sample_invoice, currency_code="GBP"), qr_payload=payload).content)

    assert seen == [pytest.approx(303.105)]
    assert "Scan to pay" in texts


def test_export_into_directory(tmp_path, sample_invoice):
    document = export_invoice_pdf(tmp_path, sample_invoice)

    written = tmp_path / "invoice-2025-001.pdf"
    assert written.read_bytes() == document.content


def test_line_items_must_be_iterable():
    with pytest.raises(TypeError):
        InvoiceRecord(line_items=5)


def test_unreadable_logo_path_is_skipped(sample_invoice, tmp_path):
    for source in ("logo\0.png", tmp_path / "lo\0go.png", tmp_path / "missing.png"):
        document = render(sample_invoice, logo_image=source)
        assert document.warnings[0].startswith("logo skipped")
        assert b"/XObject" not in document.content


def _logo_placement(content):
    match = re.search(rb"q ([\d.]+) 0 0 ([\d.]+) ([\d.]+) ([\d.]+) cm /Logo Do Q", content)
    return tuple(float(value) for value in match.groups())


@pytest.mark.parametrize(
    "template, expected",
    [
        ("classic", (40, 20, 505, 766)),  # right of the title
        ("modern", (40, 20, 277.5, 726)),  # centered beneath the title
        ("creative", (40, 20, 50, 722)),  # left-aligned beneath the title
    ],
)
def test_logo_position_per_template(sample_invoice, png_logo, template, expected):
    assert _logo_placement(render(sample_invoice, logo_image=png_logo, template=template).content) == expected


def test_table_border_styles(sample_invoice):
    classic = render(sample_invoice, template="classic", qr=False).content
    modern = render(sample_invoice, template="modern", qr=False).content
    creative = render(sample_invoice, template="creative", qr=False).content

    # rules: accent line under the header, no rectangles
    assert b"0.06 0.09 0.16 RG 1 w" in classic
    assert b" re " not in classic
    # fill: accent header background
    assert b"0.01 0.18 0.27 rg 0.01 0.18 0.27 RG 50 " in modern
    assert b" re f\n" in modern
    assert b" re S\n" not in modern
    # box: stroked header and row boxes
    assert b" re S\n" in creative
    assert b" re f\n" not in creative


def test_filename_drops_unsafe_characters(sample_invoice):
    document = render(replace(sample_invoice, invoice_number='2025/01:a*b?"c<d>e|f\\g'))
    assert document.filename == "invoice-2025-01-a-b--c-d-e-f-g.pdf"
