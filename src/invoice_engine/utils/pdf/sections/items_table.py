from __future__ import annotations

from invoice_engine.core.calculations.totals_calculator import line_total
from invoice_engine.core.models.invoice import LineItem
from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_line, _draw_rect, _draw_text, _set_color, fit_text
from invoice_engine.utils.pdf.core.fonts import BOLD, REGULAR
from invoice_engine.utils.pdf.core.formatting import format_quantity
from invoice_engine.utils.pdf.core.layout_common import (
    MARGIN_X,
    RIGHT_X,
    TABLE_HEADER_HEIGHT,
    TABLE_PAD,
    TABLE_ROW_HEIGHT,
    TABLE_TEXT_SIZE,
    color,
)

QTY_COL_W = 60
TABLE_W = RIGHT_X - MARGIN_X


def column_edges(ctx: RenderContext) -> tuple[float, float, float, float]:
    """(description left x, quantity right x, unit price right x, line total right x)."""
    qty, price, total = ctx.template.column_offsets
    return (
        MARGIN_X + TABLE_PAD,
        RIGHT_X - qty - TABLE_PAD,
        RIGHT_X - price - TABLE_PAD,
        RIGHT_X - total - TABLE_PAD,
    )


def build_row_cells(ctx: RenderContext, item: LineItem) -> list[str]:
    """Description, quantity, unit price, line total; the line total is recomputed here."""
    return [
        str(item.description or ""),
        format_quantity(item.quantity, ctx.fmt),
        ctx.money(item.unit_price),
        ctx.money(line_total(item)),
    ]


def _draw_cells(ctx: RenderContext, cells: list[str], baseline: float, font: str) -> str:
    desc_x, qty_x, price_x, total_x = column_edges(ctx)
    desc_w = qty_x - QTY_COL_W - desc_x
    family = ctx.family
    parts = [_draw_text([fit_text(cells[0], desc_w, family, font, TABLE_TEXT_SIZE)], desc_x, baseline, font, TABLE_TEXT_SIZE, family=family)]
    for text, right in zip(cells[1:], (qty_x, price_x, total_x)):
        parts.append(_draw_text([text], right, baseline, font, TABLE_TEXT_SIZE, align="right", family=family))
    return "".join(parts)


def render_table_header(ctx: RenderContext, top_y: float) -> tuple[str, float]:
    template = ctx.template
    bottom = top_y - TABLE_HEADER_HEIGHT
    headers = [
        ctx.label("table.description"),
        ctx.label("table.quantity"),
        ctx.label("table.unit_price"),
        ctx.label("table.total"),
    ]
    parts: list[str] = []
    if template.table_border == "fill":
        parts.append(_set_color(template.accent))
        parts.append(_draw_rect(MARGIN_X, bottom, TABLE_W, TABLE_HEADER_HEIGHT, stroke=False, fill=True))
        parts.append(_set_color(color("white")))
    elif template.table_border == "box":
        parts.append(_set_color(template.accent))
        parts.append(_draw_rect(MARGIN_X, bottom, TABLE_W, TABLE_HEADER_HEIGHT, stroke=True, fill=False))
    parts.append(_draw_cells(ctx, headers, top_y - 14, BOLD))
    parts.append(_set_color(color("text")))
    if template.table_border == "rules":
        parts.append(_draw_line(MARGIN_X, bottom, RIGHT_X, bottom, template.accent, width=1))
    return "".join(parts), bottom


def render_item_row(ctx: RenderContext, item: LineItem, index: int, top_y: float) -> tuple[str, float]:
    template = ctx.template
    bottom = top_y - TABLE_ROW_HEIGHT
    parts: list[str] = []
    if template.zebra and index % 2 == 1:
        parts.append(_set_color(color("row_alt")))
        parts.append(_draw_rect(MARGIN_X, bottom, TABLE_W, TABLE_ROW_HEIGHT, stroke=False, fill=True))
        parts.append(_set_color(color("text")))
    parts.append(_draw_cells(ctx, build_row_cells(ctx, item), top_y - 13, REGULAR))
    if template.table_border == "box":
        parts.append(f"{color('rule')} RG ")
        parts.append(_draw_rect(MARGIN_X, bottom, TABLE_W, TABLE_ROW_HEIGHT, stroke=True, fill=False))
    elif template.table_border == "rules":
        parts.append(_draw_line(MARGIN_X, bottom, RIGHT_X, bottom, color("rule"), width=0.3))
    return "".join(parts), bottom
