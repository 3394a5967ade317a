from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from invoice_engine.core.models.invoice import InvoiceRecord
from invoice_engine.core.services.invoice import InvoiceDataError, build_invoice_record, invoice_to_dict

logger = logging.getLogger(__name__)

DRAFT_PATH = Path(__file__).resolve().parents[2] / "data" / "draft.json"


def load_draft(path: Path | None = None) -> Optional[InvoiceRecord]:
    """
    Restore the last saved form state. Missing or broken drafts yield None so the form starts empty.
    """
    target = path or DRAFT_PATH
    if not target.exists():
        return None
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Discarding unreadable draft %s: %s", target, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Discarding draft %s: expected an object", target)
        return None
    try:
        return build_invoice_record(data)
    except InvoiceDataError as exc:
        logger.warning("Discarding draft %s: %s", target, exc)
        return None


def save_draft(invoice: InvoiceRecord, path: Path | None = None) -> Path:
    target = path or DRAFT_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(invoice_to_dict(invoice), ensure_ascii=False, indent=2), encoding="utf-8")
    return target
