"""
Module: exporter.layout

Purpose:
    Flow layout of blocks onto fixed-size pages.
    The cursor places blocks top to bottom, the page break policy opens
    pages when a block would cross the footer reserve and the registry
    records where each section heading landed.

Key Classes:
    - LayoutConfig: Page geometry
    - LayoutCursor: Block placement
    - PageBreakPolicy: Page break decisions
    - SectionRegistry: ToC entry log
    - Block, TocEntry, PageState: Layout models

Dependencies:
    - reportlab.lib.pagesizes: Paper sizes
    - exporter.output.backend: Measurement

Used By:
    - exporter.sections: Section assembly
    - exporter.controller: Generation pass
"""

from .config import LayoutConfig, PAGE_SIZES_MM, DEFAULT_RESERVE_FOOTER_SPACE
from .models import Block, BlockPlacement, Cursor, PageState, TocEntry
from .paginator import PageBreakPolicy
from .registry import SectionRegistry
from .cursor import LayoutCursor

__all__ = [
    # Config
    "LayoutConfig",
    "PAGE_SIZES_MM",
    "DEFAULT_RESERVE_FOOTER_SPACE",
    # Models
    "Block",
    "BlockPlacement",
    "Cursor",
    "PageState",
    "TocEntry",
    # Engine
    "PageBreakPolicy",
    "SectionRegistry",
    "LayoutCursor",
]
