from __future__ import annotations

from invoice_engine.core.models.payment_term import get_payment_term
from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_text, fit_text
from invoice_engine.utils.pdf.core.fonts import BOLD, REGULAR
from invoice_engine.utils.pdf.core.formatting import format_date
from invoice_engine.utils.pdf.core.layout_common import BODY_SIZE, LEADING, MARGIN_X, META_X, RIGHT_X, SECTION_GAP

SELLER_COL_W = META_X - MARGIN_X - 16
META_VALUE_W = 110


def build_seller_lines(ctx: RenderContext) -> list[str]:
    """Seller identity; blank fields stay as blank lines so the block keeps its shape."""
    inv = ctx.invoice
    lines = [inv.sender_display_name or "", inv.seller_name or ""]
    lines.extend((inv.address or "").splitlines() or [""])
    lines.append(f"{ctx.label('seller.registration')}: {inv.business_registration_id or ''}")
    lines.append(f"{ctx.label('seller.tax_id')}: {inv.tax_id or ''}")
    lines.append(f"{ctx.label('seller.iban')}: {inv.bank_account or ''}")
    return lines


def payment_term_label(ctx: RenderContext) -> str:
    """Localized term label; unknown codes print as given."""
    code = ctx.invoice.payment_term_code or ""
    term = get_payment_term(code)
    if term is None:
        return code
    key = f"payment_terms.{term.code}"
    label = ctx.resolve(key)
    return term.label if label == key else label


def build_meta_pairs(ctx: RenderContext) -> list[tuple[str, str]]:
    inv = ctx.invoice
    return [
        (ctx.label("meta.number"), inv.invoice_number or ""),
        (ctx.label("meta.issue_date"), format_date(inv.issue_date, ctx.fmt)),
        (ctx.label("meta.due_date"), format_date(ctx.due_date, ctx.fmt)),
        (ctx.label("meta.payment_term"), payment_term_label(ctx)),
    ]


def render_parties(ctx: RenderContext, top_y: float) -> tuple[str, float]:
    """Seller block left, invoice metadata right; both columns start at fixed x offsets."""
    parts: list[str] = []
    family = ctx.family
    baseline = top_y - BODY_SIZE

    seller_lines = [fit_text(line, SELLER_COL_W, family, REGULAR, BODY_SIZE) for line in build_seller_lines(ctx)]
    if seller_lines:
        parts.append(_draw_text(seller_lines[:1], MARGIN_X, baseline, BOLD, BODY_SIZE, family=family))
        parts.append(_draw_text(seller_lines[1:], MARGIN_X, baseline - LEADING, REGULAR, BODY_SIZE, leading=LEADING, family=family))

    pairs = build_meta_pairs(ctx)
    y = baseline
    for label, value in pairs:
        parts.append(_draw_text([f"{label}:"], META_X, y, BOLD, BODY_SIZE, family=family))
        value = fit_text(value, META_VALUE_W, family, REGULAR, BODY_SIZE)
        parts.append(_draw_text([value], RIGHT_X, y, REGULAR, BODY_SIZE, align="right", family=family))
        y -= LEADING

    rows = max(len(seller_lines), len(pairs))
    return "".join(parts), top_y - rows * LEADING - SECTION_GAP / 2
