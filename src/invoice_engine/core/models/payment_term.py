from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class PaymentTerm:
    """Named payment policy: label plus calendar-day offset from the issue date."""

    code: str
    label: str
    days: int


PAYMENT_TERMS: Dict[str, PaymentTerm] = {
    term.code: term
    for term in (
        PaymentTerm(code="7_days", label="7 days", days=7),
        PaymentTerm(code="14_days", label="14 days", days=14),
        PaymentTerm(code="30_days", label="30 days", days=30),
        PaymentTerm(code="net_15", label="Net 15", days=15),
        PaymentTerm(code="net_60", label="Net 60", days=60),
    )
}


def get_payment_term(code: Optional[str]) -> Optional[PaymentTerm]:
    if not code:
        return None
    return PAYMENT_TERMS.get(str(code))
