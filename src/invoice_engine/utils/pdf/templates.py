"""
Invoice templates as plain configuration records.
Every template is rendered by the same layout routine; only these parameters differ.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Union


@dataclass(frozen=True)
class TemplateConfig:
    id: str
    name: str
    description: str
    accent: str  # "r g b", components 0-1
    font_family: str = "helvetica"
    title_size: int = 20
    header_align: str = "left"  # left | center
    logo_position: str = "right"  # right | center | left
    table_border: str = "rules"  # rules | box | fill
    # right edges of quantity / unit price / line total, measured from the right margin
    column_offsets: Tuple[int, int, int] = (200, 95, 0)
    zebra: bool = False

    @property
    def logo_beside_title(self) -> bool:
        return self.header_align == "left" and self.logo_position == "right"


TEMPLATES: Dict[str, TemplateConfig] = {
    "classic": TemplateConfig(
        id="classic",
        name="Classic",
        description="Traditional professional layout",
        accent="0.06 0.09 0.16",
        font_family="times",
        title_size=22,
        header_align="left",
        logo_position="right",
        table_border="rules",
    ),
    "modern": TemplateConfig(
        id="modern",
        name="Modern",
        description="Clean and minimalist design",
        accent="0.01 0.18 0.27",
        font_family="helvetica",
        title_size=24,
        header_align="center",
        logo_position="center",
        table_border="fill",
        column_offsets=(190, 90, 6),
        zebra=True,
    ),
    "creative": TemplateConfig(
        id="creative",
        name="Creative",
        description="Bold accent color with a boxed table",
        accent="0.85 0.33 0.31",
        font_family="helvetica",
        title_size=28,
        header_align="center",
        logo_position="left",
        table_border="box",
        column_offsets=(190, 90, 6),
    ),
}

DEFAULT_TEMPLATE = "classic"


def get_template(template: Union[str, TemplateConfig, None] = None) -> TemplateConfig:
    """Template by id; unknown ids fall back to the classic template."""
    if isinstance(template, TemplateConfig):
        return template
    return TEMPLATES.get(str(template or DEFAULT_TEMPLATE), TEMPLATES[DEFAULT_TEMPLATE])
