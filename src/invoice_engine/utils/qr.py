"""
Payment QR helpers: payload strategies plus the module matrix drawn into the PDF.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Callable, Optional, Sequence

import qrcode
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError

from invoice_engine.core.calculations.totals_calculator import DerivedTotals
from invoice_engine.core.models.invoice import InvoiceRecord
from invoice_engine.utils.pdf.core.formatting import round_for_display

logger = logging.getLogger(__name__)

QrPayloadStrategy = Callable[[InvoiceRecord, DerivedTotals], Optional[str]]

EPC_MAX_AMOUNT = Decimal("999999999.99")


class QrEncodeError(ValueError):
    """Payload could not be encoded into a QR symbol."""


def make_qr_matrix(data: str) -> Sequence[Sequence[bool]]:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=0, box_size=1)
    try:
        qr.add_data(data)
        qr.make(fit=True)
    except (DataOverflowError, ValueError, TypeError) as exc:
        raise QrEncodeError(str(exc) or exc.__class__.__name__) from exc
    return qr.get_matrix()


def epc_payload(invoice: InvoiceRecord, totals: DerivedTotals) -> Optional[str]:
    """
    EPC069-12 ("GiroCode") SEPA credit transfer payload.
    Only EUR transfers with an IBAN and a positive total are representable; otherwise None.
    """
    if invoice.currency_code != "EUR":
        logger.info("No EPC payload for currency %s", invoice.currency_code)
        return None
    iban = re.sub(r"\s+", "", invoice.bank_account or "").upper()
    if not iban:
        return None
    amount = round_for_display(totals.total)
    if not amount.is_finite() or amount <= 0 or amount > EPC_MAX_AMOUNT:
        return None
    beneficiary = (invoice.seller_name or invoice.sender_display_name or "").strip()[:70]
    lines = [
        "BCD",  # service tag
        "002",  # version (BIC optional)
        "1",  # UTF-8
        "SCT",
        "",  # BIC
        beneficiary,
        iban,
        f"EUR{amount}",
        "",  # purpose
        "",  # structured reference
        (invoice.invoice_number or "").strip()[:140],
    ]
    return "\n".join(lines)
