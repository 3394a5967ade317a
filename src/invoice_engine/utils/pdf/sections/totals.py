from __future__ import annotations

from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_line, _draw_text
from invoice_engine.utils.pdf.core.fonts import BOLD, REGULAR
from invoice_engine.utils.pdf.core.formatting import format_rate
from invoice_engine.utils.pdf.core.layout_common import (
    BODY_SIZE,
    MARGIN_X,
    RIGHT_X,
    SECTION_GAP,
    TOTALS_BLOCK_W,
    TOTALS_ROW_HEIGHT,
    color,
)
from invoice_engine.utils.pdf.sections.items_table import column_edges

TOTALS_X = RIGHT_X - TOTALS_BLOCK_W


def build_totals_rows(ctx: RenderContext) -> list[tuple[str, str, bool]]:
    """(label, amount, bold) rows; only the grand total is bold."""
    totals = ctx.totals
    rate = format_rate(ctx.invoice.tax_rate_percent)
    return [
        (ctx.label("totals.subtotal"), ctx.money(totals.subtotal), False),
        (ctx.label("totals.tax", rate=rate), ctx.money(totals.tax_amount), False),
        (ctx.label("totals.total"), ctx.money(totals.total), True),
    ]


def totals_height() -> float:
    return SECTION_GAP + 3 * TOTALS_ROW_HEIGHT + 4


def render_totals(ctx: RenderContext, top_y: float) -> tuple[str, float]:
    parts: list[str] = [_draw_line(MARGIN_X, top_y - 6, RIGHT_X, top_y - 6, color("rule"))]
    y = top_y - SECTION_GAP
    amount_x = column_edges(ctx)[3]
    for label, amount, bold in build_totals_rows(ctx):
        font = BOLD if bold else REGULAR
        if bold:
            parts.append(_draw_line(TOTALS_X, y - 1, RIGHT_X, y - 1, ctx.template.accent, width=0.8))
            y -= 4
        baseline = y - 12
        parts.append(_draw_text([f"{label}:"], TOTALS_X, baseline, font, BODY_SIZE, family=ctx.family))
        parts.append(_draw_text([amount], amount_x, baseline, font, BODY_SIZE, align="right", family=ctx.family))
        y -= TOTALS_ROW_HEIGHT
    return "".join(parts), y
