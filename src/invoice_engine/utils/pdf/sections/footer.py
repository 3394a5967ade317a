from __future__ import annotations

from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_line, _draw_text, _set_color, fit_text
from invoice_engine.utils.pdf.core.fonts import REGULAR
from invoice_engine.utils.pdf.core.layout_common import FOOTER_RULE_Y, FOOTER_SIZE, FOOTER_Y, MARGIN_X, RIGHT_X, color

PAGE_COUNTER_W = 80


def render_footer(ctx: RenderContext, page: int, pages: int) -> str:
    """Boilerplate line and page counter at a fixed offset from the bottom, whatever sits above."""
    family = ctx.family
    text = fit_text(ctx.label("footer.text"), RIGHT_X - MARGIN_X - PAGE_COUNTER_W, family, REGULAR, FOOTER_SIZE)
    counter = ctx.label("footer.page", page=str(page), pages=str(pages))
    return "".join(
        [
            _draw_line(MARGIN_X, FOOTER_RULE_Y, RIGHT_X, FOOTER_RULE_Y, color("rule")),
            _set_color(color("muted")),
            _draw_text([text], MARGIN_X, FOOTER_Y, REGULAR, FOOTER_SIZE, family=family),
            _draw_text([counter], RIGHT_X, FOOTER_Y, REGULAR, FOOTER_SIZE, align="right", family=family),
            _set_color(color("text")),
        ]
    )
