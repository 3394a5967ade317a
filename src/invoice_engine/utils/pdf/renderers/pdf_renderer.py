"""
Invoice renderer: one top-down cursor layout parametrized by a template.
Each call builds its own fonts, images and QR matrix; nothing is shared between calls.
"""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from invoice_engine.core.calculations.totals_calculator import calculate_due_date, calculate_totals
from invoice_engine.core.models.invoice import InvoiceRecord
from invoice_engine.core.services.labels import LabelSource, Resolver, as_resolver
from invoice_engine.utils.pdf.core.builder import build_pdf_bytes
from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_line, _draw_text, _set_color, fit_text
from invoice_engine.utils.pdf.core.fonts import BOLD, get_family
from invoice_engine.utils.pdf.core.formatting import number_format
from invoice_engine.utils.pdf.core.images import LogoDecodeError, PdfImage, RasterImage, decode_logo
from invoice_engine.utils.pdf.core.layout_common import (
    CONTENT_MIN_Y,
    MARGIN_X,
    QR_CLEARANCE,
    QR_TOP,
    RIGHT_X,
    SECTION_GAP,
    TABLE_ROW_HEIGHT,
    TOP_Y,
    color,
)
from invoice_engine.utils.pdf.sections.footer import render_footer
from invoice_engine.utils.pdf.sections.header import LOGO_NAME, render_header
from invoice_engine.utils.pdf.sections.items_table import render_item_row, render_table_header
from invoice_engine.utils.pdf.sections.notes import build_notes_lines, clip_notes, notes_height, render_notes
from invoice_engine.utils.pdf.sections.parties import render_parties
from invoice_engine.utils.pdf.sections.payment_qr import render_payment_qr
from invoice_engine.utils.pdf.sections.totals import render_totals, totals_height
from invoice_engine.utils.pdf.templates import TemplateConfig, get_template
from invoice_engine.utils.qr import QrEncodeError, QrPayloadStrategy, epc_payload, make_qr_matrix

logger = logging.getLogger(__name__)

CONTINUATION_SIZE = 12
_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|]')


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    filename: str
    page_count: int
    warnings: tuple[str, ...] = ()

    def to_base64(self) -> str:
        return base64.b64encode(self.content).decode("ascii")

    def write(self, path: Path) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.content)
        return target


def suggested_filename(invoice: InvoiceRecord, resolve: Resolver) -> str:
    """`<prefix>-<invoice number or placeholder>.pdf`"""
    number = _UNSAFE_FILENAME.sub("-", (invoice.invoice_number or "").strip())
    return f"{resolve('filename.prefix')}-{number or resolve('filename.placeholder')}.pdf"


def render(
    invoice: InvoiceRecord,
    logo_image: RasterImage | None = None,
    template: Union[str, TemplateConfig, None] = None,
    labels: LabelSource = None,
    qr: bool = True,
    qr_payload: QrPayloadStrategy | None = None,
) -> RenderedDocument:
    """
    Render `invoice` into a one-or-more page A4 PDF.
    A logo that cannot be decoded or a QR payload that cannot be encoded is skipped and reported in
    `RenderedDocument.warnings`; the rest of the document is still produced.
    """
    resolve = as_resolver(labels)
    tpl = get_template(template)
    totals = calculate_totals(invoice.line_items, invoice.tax_rate_percent)
    ctx = RenderContext(
        invoice=invoice,
        totals=totals,
        # the issue date stands in for "now" so unknown terms do not make renders clock-dependent
        due_date=calculate_due_date(invoice.issue_date, invoice.payment_term_code, today=invoice.issue_date),
        template=tpl,
        family=get_family(tpl.font_family),
        resolve=resolve,
        fmt=number_format(resolve),
    )
    warnings: list[str] = []
    logo = _load_logo(logo_image, warnings)
    matrix = _build_qr_matrix(ctx, qr, qr_payload or epc_payload, warnings)

    pages = _layout_pages(ctx, logo, matrix)
    streams = ["".join(parts) + render_footer(ctx, idx + 1, len(pages)) for idx, parts in enumerate(pages)]
    content = build_pdf_bytes(streams, ctx.family, images={LOGO_NAME: logo} if logo else None)
    return RenderedDocument(
        content=content,
        filename=suggested_filename(invoice, resolve),
        page_count=len(pages),
        warnings=tuple(warnings),
    )


def _load_logo(logo_image: RasterImage | None, warnings: list[str]) -> PdfImage | None:
    if logo_image is None:
        return None
    try:
        return decode_logo(logo_image)
    except LogoDecodeError as exc:
        logger.warning("Rendering without logo: %s", exc)
        warnings.append(f"logo skipped: {exc}")
        return None


def _build_qr_matrix(
    ctx: RenderContext,
    enabled: bool,
    strategy: QrPayloadStrategy,
    warnings: list[str],
) -> Sequence[Sequence[bool]] | None:
    if not enabled:
        return None
    payload = strategy(ctx.invoice, ctx.totals)
    if not payload:
        return None
    try:
        return make_qr_matrix(payload)
    except QrEncodeError as exc:
        logger.warning("Rendering without payment QR: %s", exc)
        warnings.append(f"payment QR skipped: {exc}")
        return None


def _continuation_heading(ctx: RenderContext) -> tuple[str, float]:
    heading = f"{ctx.label('invoice.title')} {ctx.invoice.invoice_number or ''} - {ctx.label('table.continued')}"
    heading = fit_text(heading, RIGHT_X - MARGIN_X, ctx.family, BOLD, CONTINUATION_SIZE)
    content = (
        _set_color(ctx.template.accent)
        + _draw_text([heading], MARGIN_X, TOP_Y - CONTINUATION_SIZE, BOLD, CONTINUATION_SIZE, family=ctx.family)
        + _set_color(color("text"))
    )
    return content, TOP_Y - CONTINUATION_SIZE - SECTION_GAP


def _tail_fits(y: float, notes_lines: list[str], with_qr: bool) -> bool:
    """Totals must end above the QR box (when drawn); notes must end above the footer area."""
    totals_end = y - totals_height()
    totals_limit = QR_TOP + QR_CLEARANCE if with_qr else CONTENT_MIN_Y
    return totals_end >= totals_limit and totals_end - notes_height(notes_lines) >= CONTENT_MIN_Y


def _layout_pages(ctx: RenderContext, logo: PdfImage | None, matrix) -> list[list[str]]:
    pages: list[list[str]] = [[]]

    content, y = render_header(ctx, logo, TOP_Y)
    pages[-1].append(content)
    content, y = render_parties(ctx, y)
    pages[-1].append(content)
    pages[-1].append(_draw_line(MARGIN_X, y, RIGHT_X, y, color("rule")))
    y -= SECTION_GAP

    content, y = render_table_header(ctx, y)
    pages[-1].append(content)
    for index, item in enumerate(ctx.invoice.line_items):
        if y - TABLE_ROW_HEIGHT < CONTENT_MIN_Y:
            heading, y = _continuation_heading(ctx)
            pages.append([heading])
            content, y = render_table_header(ctx, y)
            pages[-1].append(content)
        content, y = render_item_row(ctx, item, index, y)
        pages[-1].append(content)

    with_qr = bool(matrix)
    notes_lines = build_notes_lines(ctx, with_qr)
    if not _tail_fits(y, notes_lines, with_qr):
        heading, y = _continuation_heading(ctx)
        pages.append([heading])

    content, y = render_totals(ctx, y)
    pages[-1].append(content)
    notes_lines = clip_notes(notes_lines, y - CONTENT_MIN_Y)
    content, _ = render_notes(ctx, notes_lines, y)
    pages[-1].append(content)
    pages[-1].append(render_payment_qr(ctx, matrix))
    return pages
