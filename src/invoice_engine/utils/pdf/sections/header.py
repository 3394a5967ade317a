from __future__ import annotations

from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_image, _draw_text, _set_color
from invoice_engine.utils.pdf.core.fonts import BOLD
from invoice_engine.utils.pdf.core.images import PdfImage
from invoice_engine.utils.pdf.core.layout_common import (
    LOGO_BOX_H,
    LOGO_BOX_W,
    LOGO_GAP,
    MARGIN_X,
    PAGE_W,
    RIGHT_X,
    SECTION_GAP,
    color,
)

LOGO_NAME = "Logo"


def render_header(ctx: RenderContext, logo: PdfImage | None, top_y: float) -> tuple[str, float]:
    """
    Title in the accent color plus the optional logo. Returns (content, cursor below the header).
    Logo beside the title (right slot) or stacked beneath it, as the template says.
    """
    template = ctx.template
    parts: list[str] = []
    title_y = top_y - template.title_size
    title = ctx.label("invoice.title")

    parts.append(_set_color(template.accent))
    if template.header_align == "center":
        parts.append(_draw_text([title], PAGE_W / 2, title_y, BOLD, template.title_size, align="center", family=ctx.family))
    else:
        parts.append(_draw_text([title], MARGIN_X, title_y, BOLD, template.title_size, family=ctx.family))
    parts.append(_set_color(color("text")))

    bottom = title_y - 6
    if logo is not None:
        w, h = logo.fit(LOGO_BOX_W, LOGO_BOX_H)
        if template.logo_beside_title:
            logo_top = top_y
        else:
            logo_top = bottom - LOGO_GAP
        if template.logo_beside_title or template.logo_position == "right":
            logo_x = RIGHT_X - w
        elif template.logo_position == "center":
            logo_x = (PAGE_W - w) / 2
        else:
            logo_x = MARGIN_X
        parts.append(_draw_image(LOGO_NAME, logo_x, logo_top - h, w, h))
        bottom = min(bottom, logo_top - h)

    return "".join(parts), bottom - SECTION_GAP
