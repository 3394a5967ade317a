import re
import sys
from collections import namedtuple
from datetime import date
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

TextRun = namedtuple("TextRun", "font size x y text")

_STREAM_RE = re.compile(rb"stream\n(.*?)\nendstream", re.DOTALL)
_TEXT_RE = re.compile(rb"BT (/F\d) (\S+) Tf (\S+) (\S+) Td \(((?:\\.|[^\\)])*)\) Tj ET")


def _unescape(raw: bytes) -> str:
    out = bytearray()
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == 0x5C and i + 1 < len(raw):
            nxt = raw[i + 1 : i + 4]
            if re.fullmatch(rb"[0-7]{3}", nxt):
                out.append(int(nxt, 8))
                i += 4
                continue
            out.append(raw[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return out.decode("cp1252")


def parse_pages(content: bytes) -> list[list[TextRun]]:
    """Text runs per page content stream, in drawing order."""
    pages = []
    for stream in _STREAM_RE.findall(content):
        if b" Tj ET" not in stream:
            continue
        runs = [
            TextRun(m.group(1).decode(), float(m.group(2)), float(m.group(3)), float(m.group(4)), _unescape(m.group(5)))
            for m in _TEXT_RE.finditer(stream)
        ]
        pages.append(runs)
    return pages


@pytest.fixture
def pdf_pages():
    return parse_pages


@pytest.fixture
def pdf_text():
    def _texts(content: bytes) -> list[str]:
        return [run.text for page in parse_pages(content) for run in page]

    return _texts


@pytest.fixture
def sample_items():
    from invoice_engine.core.models.invoice import LineItem

    return (
        LineItem(description="Consulting", quantity=2, unit_price=100.00),
        LineItem(description="Travel", quantity=1, unit_price=50.50),
    )


@pytest.fixture
def sample_invoice(sample_items):
    from invoice_engine.core.models.invoice import InvoiceRecord

    return InvoiceRecord(
        seller_name="Jansen Consultancy B.V.",
        sender_display_name="Piet Jansen",
        address="Keizersgracht 1\n1015 AA Amsterdam",
        business_registration_id="12345678",
        tax_id="NL123456789B01",
        bank_account="NL91 ABNA 0417 1643 00",
        invoice_number="2025-001",
        issue_date=date(2025, 1, 1),
        payment_term_code="30_days",
        line_items=sample_items,
        tax_rate_percent=21,
        currency_code="EUR",
        notes=None,
    )


@pytest.fixture
def png_logo():
    import io

    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGBA", (40, 20), (200, 30, 30, 255)).save(buf, format="PNG")
    return buf.getvalue()
