"""
Module: exporter.layout.models

Purpose:
    Data models for the layout engine.
    Blocks are the atomic content units pushed through the cursor; the
    cursor, page states and placements record where they ended up.

Key Classes:
    - Block: Atomic content unit with a height and a draw action
    - BlockPlacement: A block positioned on a page
    - Cursor: Mutable (page, y, section) write position
    - PageState: Per-page section label for headers
    - TocEntry: Recorded navigable section

Dependencies:
    - dataclasses (std)

Used By:
    - exporter.layout.cursor: Block placement
    - exporter.layout.paginator: Page breaks
    - exporter.layout.registry: ToC log
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from capdoc_toolkit.exporter.output.backend import RenderBackend

# draw(backend, x, y, width): y is the block top in mm from the page top
DrawAction = Callable[["RenderBackend", float, float, float], None]
# measure(backend, width) -> height in mm
MeasureAction = Callable[["RenderBackend", float], float]


@dataclass(frozen=True)
class Block:
    """
    Atomic content unit (immutable).

    A block has either a fixed ``height`` or a ``measure`` callback that
    computes its height from wrapped text at push time. Blocks are never
    split across pages.

    Attributes:
        draw: Draw action called with (backend, x, y, width)
        height: Fixed vertical extent in mm
        measure: Height callback used when ``height`` is None
        section: Section label for a page opened by this block
        label: Short description for logs and tests

    Example:
        >>> block = Block(draw=lambda b, x, y, w: None, height=12, label="gap")
        >>> block.height
        12
    """

    draw: DrawAction
    height: Optional[float] = None
    measure: Optional[MeasureAction] = None
    section: Optional[str] = None
    label: str = ""

    def __post_init__(self) -> None:
        if (self.height is None) == (self.measure is None):
            raise ValueError("Block needs exactly one of height or measure")
        if self.height is not None and self.height < 0:
            raise ValueError(f"Block height must be non-negative: {self.height}")

    def required_height(self, backend: RenderBackend, width: float) -> float:
        """Vertical extent of the block when laid out at ``width``."""
        if self.height is not None:
            return self.height
        return max(0.0, float(self.measure(backend, width)))


@dataclass(frozen=True)
class BlockPlacement:
    """
    A block positioned on a page.

    Attributes:
        label: Block label
        page_index: Page the block was drawn on
        top: Y offset of the block top from the page top (mm)
        height: Block height (mm)
    """

    label: str
    page_index: int
    top: float
    height: float

    @property
    def bottom(self) -> float:
        """Bottom Y coordinate (top + height)."""
        return self.top + self.height


@dataclass
class Cursor:
    """
    Current write position.

    ``page_index`` is -1 until the first page is opened.
    """

    page_index: int = -1
    y: float = 0.0
    section: str = ""


@dataclass
class PageState:
    """Per-page context established during assembly and read by decorations."""

    index: int
    section: str = ""

    @property
    def number(self) -> int:
        """Printed 1-based page number."""
        return self.index + 1


@dataclass(frozen=True)
class TocEntry:
    """
    A navigable section as it was actually rendered.

    Attributes:
        title: Section title
        level: Nesting level, 1 for top-level sections
        page_index: 0-based index of the page the heading was drawn on
    """

    title: str
    level: int
    page_index: int

    def __post_init__(self) -> None:
        if self.level < 1:
            raise ValueError(f"ToC level must be >= 1: {self.level}")
        if self.page_index < 0:
            raise ValueError(f"ToC page index must be >= 0: {self.page_index}")

    @property
    def page_number(self) -> int:
        """Printed 1-based page number."""
        return self.page_index + 1
