import pytest

from invoice_engine.core.calculations.totals_calculator import calculate_totals
from invoice_engine.utils.qr import QrEncodeError, epc_payload, make_qr_matrix


def _payload(invoice):
    return epc_payload(invoice, calculate_totals(invoice.line_items, invoice.tax_rate_percent))


def test_epc_payload_lines(sample_invoice):
    assert _payload(sample_invoice).split("\n") == [
        "BCD",
        "002",
        "1",
        "SCT",
        "",
        "Jansen Consultancy B.V.",
        "NL91ABNA0417164300",
        "EUR303.11",
        "",
        "",
        "2025-001",
    ]


@pytest.mark.parametrize(
    "changes",
    [
        {"currency_code": "USD"},
        {"bank_account": "  "},
        {"line_items": ()},
    ],
)
def test_epc_payload_not_representable(sample_invoice, changes):
    from dataclasses import replace

    assert _payload(replace(sample_invoice, **changes)) is None


def test_matrix_is_square():
    matrix = make_qr_matrix("hello")
    assert len(matrix) == 21
    assert all(len(row) == 21 for row in matrix)


def test_oversized_payload_raises():
    with pytest.raises(QrEncodeError):
        make_qr_matrix("x" * 5000)


def test_epc_payload_rejects_non_finite_total(sample_invoice):
    from invoice_engine.core.calculations.totals_calculator import DerivedTotals

    nan = float("nan")
    assert epc_payload(sample_invoice, DerivedTotals(nan, nan, nan)) is None
