from pathlib import Path
from typing import Any

from invoice_engine.core.models.invoice import InvoiceRecord
from invoice_engine.utils.pdf.renderers.pdf_renderer import RenderedDocument, render


def export_invoice_pdf(path: Path, invoice: InvoiceRecord, **options: Any) -> RenderedDocument:
    """
    Render and write the invoice. `path` may be a directory, then the suggested filename is used.
    Options are passed to `render` (logo_image, template, labels, qr, qr_payload).
    """
    document = render(invoice, **options)
    target = Path(path)
    if target.is_dir():
        target = target / document.filename
    document.write(target)
    return document
