from __future__ import annotations

from invoice_engine.utils.pdf.core.context import RenderContext
from invoice_engine.utils.pdf.core.drawing import _draw_text, wrap_text
from invoice_engine.utils.pdf.core.fonts import BOLD, REGULAR
from invoice_engine.utils.pdf.core.layout_common import MARGIN_X, NOTES_GAP, NOTES_SIZE, QR_CLEARANCE, QR_X, RIGHT_X

NOTES_LEADING = NOTES_SIZE + 3
TITLE_HEIGHT = NOTES_SIZE + 7


def notes_width(with_qr: bool) -> float:
    """Full width, or only the column left of the QR block when one is drawn."""
    if with_qr:
        return QR_X - 2 * QR_CLEARANCE - MARGIN_X
    return RIGHT_X - MARGIN_X


def build_notes_lines(ctx: RenderContext, with_qr: bool) -> list[str]:
    notes = (ctx.invoice.notes or "").strip()
    if not notes:
        return []
    return wrap_text(notes, notes_width(with_qr), ctx.family, REGULAR, NOTES_SIZE)


def notes_height(lines: list[str]) -> float:
    if not lines:
        return 0
    return NOTES_GAP + TITLE_HEIGHT + len(lines) * NOTES_LEADING


def clip_notes(lines: list[str], available: float) -> list[str]:
    """Keep as many lines as fit into `available` points; a cut ends with '...'."""
    if notes_height(lines) <= available:
        return lines
    room = int((available - NOTES_GAP - TITLE_HEIGHT) // NOTES_LEADING)
    if room <= 0:
        return []
    clipped = lines[:room]
    clipped[-1] = clipped[-1].rstrip(". ") + "..."
    return clipped


def render_notes(ctx: RenderContext, lines: list[str], top_y: float) -> tuple[str, float]:
    if not lines:
        return "", top_y
    y = top_y - NOTES_GAP - NOTES_SIZE
    parts = [_draw_text([f"{ctx.label('notes.title')}:"], MARGIN_X, y, BOLD, NOTES_SIZE + 1, family=ctx.family)]
    y -= TITLE_HEIGHT
    parts.append(_draw_text(lines, MARGIN_X, y, REGULAR, NOTES_SIZE, leading=NOTES_LEADING, family=ctx.family))
    return "".join(parts), top_y - notes_height(lines)
