"""
Module: exporter.layout.config

Purpose:
    Page geometry for the layout engine.
    Defines page dimensions, margins and the footer safety reserve, all in
    millimetres with a top-down y axis.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - reportlab.lib.pagesizes: Standard paper sizes
    - exporter.settings: LayoutSettings

Used By:
    - exporter.layout.paginator: Page break decisions
    - exporter.output.toc: ToC capacity
    - exporter.output.decorations: Header/footer positions
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import A4, LEGAL, LETTER
from reportlab.lib.units import mm

from capdoc_toolkit.exporter.settings import LayoutSettings

# Paper sizes in millimetres (portrait)
PAGE_SIZES_MM: dict[str, tuple[float, float]] = {
    "A4": (A4[0] / mm, A4[1] / mm),
    "Letter": (LETTER[0] / mm, LETTER[1] / mm),
    "Legal": (LEGAL[0] / mm, LEGAL[1] / mm),
}

DEFAULT_RESERVE_FOOTER_SPACE = 15.0


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    Attributes:
        page_width: Page width in mm
        page_height: Page height in mm
        margin_top: Top margin in mm
        margin_bottom: Bottom margin in mm
        margin_left: Left margin in mm
        margin_right: Right margin in mm
        reserve_footer_space: Space kept free above the bottom margin so the
            footer never overlaps the last body line

    Example:
        >>> config = LayoutConfig(page_height=280, margin_top=20, margin_bottom=20)
        >>> config.body_bottom
        245.0
    """

    page_width: float = PAGE_SIZES_MM["A4"][0]
    page_height: float = PAGE_SIZES_MM["A4"][1]

    margin_top: float = 25.0
    margin_bottom: float = 25.0
    margin_left: float = 20.0
    margin_right: float = 20.0

    reserve_footer_space: float = DEFAULT_RESERVE_FOOTER_SPACE

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.reserve_footer_space < 0:
            raise ValueError(f"reserve_footer_space must be non-negative: {self.reserve_footer_space}")
        if self.content_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.usable_height <= 0:
            raise ValueError("Margins exceed page height")

    @classmethod
    def from_settings(
        cls,
        layout: LayoutSettings,
        *,
        reserve_footer_space: float = DEFAULT_RESERVE_FOOTER_SPACE,
    ) -> LayoutConfig:
        """Build geometry from the export dialog's layout settings."""
        width, height = PAGE_SIZES_MM[layout.page_size]
        if layout.orientation == "landscape":
            width, height = height, width
        margins = layout.margins
        return cls(
            page_width=width,
            page_height=height,
            margin_top=margins.top,
            margin_bottom=margins.bottom,
            margin_left=margins.left,
            margin_right=margins.right,
            reserve_footer_space=reserve_footer_space,
        )

    @property
    def content_width(self) -> float:
        """Width available for content (page width minus margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def body_bottom(self) -> float:
        """Lowest y a block may extend to."""
        return self.page_height - self.margin_bottom - self.reserve_footer_space

    @property
    def usable_height(self) -> float:
        """Height of one page's body area."""
        return self.body_bottom - self.margin_top

    @property
    def center_x(self) -> float:
        return self.page_width / 2
