from __future__ import annotations

import unicodedata
from typing import Iterable, Sequence

from invoice_engine.utils.pdf.core.fonts import HELVETICA, FontFamily, text_width


def _encode_char(ch: str) -> bytes:
    try:
        return ch.encode("cp1252")
    except UnicodeEncodeError:
        # drop diacritics for characters outside WinAnsi (e.g. "ő" -> "o")
        normalized = unicodedata.normalize("NFKD", ch)
        return normalized.encode("ascii", "ignore")


def _escape_pdf_text(text: str) -> str:
    """PDF literal string body in WinAnsiEncoding; non-ASCII bytes become octal escapes."""
    out: list[str] = []
    for ch in str(text):
        for byte in _encode_char(ch):
            if byte in (0x5C, 0x28, 0x29):  # \ ( )
                out.append("\\" + chr(byte))
            elif byte < 0x20:
                out.append(" ")
            elif byte > 0x7E:
                out.append(f"\\{byte:03o}")
            else:
                out.append(chr(byte))
    return "".join(out)


def _fmt(value: float) -> str:
    """Coordinates with at most two decimals and no trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _set_color(rgb: str) -> str:
    return f"{rgb} rg {rgb} RG "


def _draw_text(
    lines: Iterable[str],
    x: float,
    y: float,
    font: str,
    size: float,
    leading: float | None = None,
    align: str = "left",
    family: FontFamily = HELVETICA,
) -> str:
    """
    One text object per line, top line at `y`.
    For align="right" `x` is the right edge, for align="center" the midpoint.
    """
    out = []
    spacing = leading or (size + 2)
    for line in lines:
        text = str(line)
        line_x = x
        if align != "left":
            width = text_width(text, family, font, size)
            line_x = x - width if align == "right" else x - width / 2
        out.append(f"BT {font} {_fmt(size)} Tf {_fmt(line_x)} {_fmt(y)} Td ({_escape_pdf_text(text)}) Tj ET\n")
        y -= spacing
    return "".join(out)


def _draw_rect(x: float, y: float, w: float, h: float, stroke: bool = True, fill: bool = False) -> str:
    if fill and stroke:
        op = "B"
    elif fill:
        op = "f"
    else:
        op = "S"
    return f"{_fmt(x)} {_fmt(y)} {_fmt(w)} {_fmt(h)} re {op}\n"


def _draw_line(x1: float, y1: float, x2: float, y2: float, rgb: str, width: float = 0.5) -> str:
    return f"{rgb} RG {_fmt(width)} w {_fmt(x1)} {_fmt(y1)} m {_fmt(x2)} {_fmt(y2)} l S\n"


def _draw_qr(matrix: Sequence[Sequence[bool]] | None, x: float, y: float, size: float) -> str:
    """Dark modules as filled rects, merged per row run; (x, y) is the top-left corner."""
    if not matrix:
        return ""
    ops = []
    for r, row in enumerate(matrix):
        py = y - (r + 1) * size  # PDF y grows up
        c = 0
        cols = len(row)
        while c < cols:
            if not row[c]:
                c += 1
                continue
            start = c
            while c < cols and row[c]:
                c += 1
            ops.append(_draw_rect(x + start * size, py, (c - start) * size, size, stroke=False, fill=True))
    return "".join(ops)


def _draw_image(name: str, x: float, y: float, w: float, h: float) -> str:
    """Place image XObject `name` with its bottom-left corner at (x, y)."""
    return f"q {_fmt(w)} 0 0 {_fmt(h)} {_fmt(x)} {_fmt(y)} cm /{name} Do Q\n"


def fit_text(text: str, max_width: float, family: FontFamily, font: str, size: float) -> str:
    """Single line that fits `max_width`; overlong text is cut and ends with '...'."""
    text = " ".join(str(text).split())
    if text_width(text, family, font, size) <= max_width:
        return text
    while text and text_width(text + "...", family, font, size) > max_width:
        text = text[:-1]
    return text.rstrip() + "..." if text else ""


def wrap_text(text: str, max_width: float, family: FontFamily, font: str, size: float) -> list[str]:
    """Greedy word wrap by measured width; explicit newlines start a new line."""
    lines: list[str] = []
    for paragraph in str(text).splitlines() or [""]:
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if text_width(candidate, family, font, size) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = word if text_width(word, family, font, size) <= max_width else fit_text(word, max_width, family, font, size)
        lines.append(current)
    return lines
