"""
Standard (non-embedded) PDF fonts and approximate metrics for alignment.
Text is written in WinAnsiEncoding, so the euro and pound signs print without embedding a font.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

REGULAR = "/F1"
BOLD = "/F2"


@dataclass(frozen=True)
class FontFamily:
    regular: str  # BaseFont name, e.g. "Helvetica"
    bold: str
    default_width: float  # per 1000 units, used for characters missing in `widths`
    bold_factor: float = 1.05
    widths: Mapping[str, float] = field(default_factory=dict)

    def base_font(self, font: str) -> str:
        return self.bold if font == BOLD else self.regular

    def char_width(self, ch: str) -> float:
        return self.widths.get(ch, self.default_width)


def _widths(digits: float, narrow: float, **extra: float) -> Dict[str, float]:
    table = {str(d): digits for d in range(10)}
    for ch in " .,:;|!'il":
        table[ch] = narrow
    table.update({"€": digits, "$": digits, "£": digits})
    for key, value in extra.items():
        table[key] = value
    return table


HELVETICA = FontFamily(
    regular="Helvetica",
    bold="Helvetica-Bold",
    default_width=0.52,
    widths=_widths(0.556, 0.278, **{"-": 0.333, "%": 0.889, "m": 0.833, "w": 0.722, "M": 0.833, "W": 0.944}),
)

TIMES = FontFamily(
    regular="Times-Roman",
    bold="Times-Bold",
    default_width=0.47,
    bold_factor=1.07,
    widths=_widths(0.5, 0.25, **{"-": 0.333, "%": 0.833, "m": 0.778, "w": 0.722, "M": 0.889, "W": 0.944}),
)

FAMILIES: Dict[str, FontFamily] = {
    "helvetica": HELVETICA,
    "times": TIMES,
}


def get_family(name: str | None) -> FontFamily:
    return FAMILIES.get(str(name or "").lower(), HELVETICA)


def text_width(text: str, family: FontFamily, font: str, size: float) -> float:
    width = sum(family.char_width(ch) for ch in str(text)) * size
    if font == BOLD:
        width *= family.bold_factor
    return width
