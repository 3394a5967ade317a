from __future__ import annotations

from typing import Sequence

from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_qr, _draw_text, _set_color
from invoice_engine.utils.pdf.core.fonts import REGULAR
from invoice_engine.utils.pdf.core.layout_common import QR_CAPTION_Y, QR_SIZE, QR_TOP, QR_X, color

CAPTION_SIZE = 8


def render_payment_qr(ctx: RenderContext, matrix: Sequence[Sequence[bool]] | None) -> str:
    """QR symbol in the fixed bottom-right box with a centered caption under it."""
    if not matrix:
        return ""
    modules = max(len(matrix), len(matrix[0]))
    module = QR_SIZE / modules
    parts = [
        _set_color(color("text")),
        _draw_qr(matrix, QR_X, QR_TOP, module),
        _draw_text([ctx.label("qr.caption")], QR_X + QR_SIZE / 2, QR_CAPTION_Y, REGULAR, CAPTION_SIZE, align="center", family=ctx.family),
    ]
    return "".join(parts)
