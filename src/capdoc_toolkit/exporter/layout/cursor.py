"""
Module: exporter.layout.cursor

Purpose:
    Single source of truth for where the next block goes.
    Every block pushed during assembly is measured, given room by the page
    break policy, drawn on the cursor's page and then the cursor advances.
    Callers never address pages directly.

Key Classes:
    - LayoutCursor: Block placement over a RenderBackend

Dependencies:
    - exporter.layout.paginator: PageBreakPolicy
    - exporter.layout.registry: SectionRegistry

Used By:
    - exporter.sections: Section assembly
    - exporter.output.toc: Page reservation
    - exporter.controller: Generation pass
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from .config import LayoutConfig
from .models import Block, BlockPlacement, Cursor, PageState, TocEntry
from .paginator import PageBreakPolicy
from .registry import SectionRegistry

if TYPE_CHECKING:
    from capdoc_toolkit.exporter.output.backend import RenderBackend

logger = logging.getLogger(__name__)


class LayoutCursor:
    """
    Flow layout over fixed-size pages.

    Args:
        backend: Drawing and measurement provider
        config: Page geometry

    Example:
        >>> layout = LayoutCursor(backend, LayoutConfig())
        >>> layout.new_page("Glossary")
        0
        >>> layout.push(spacer_block(10))
        >>> layout.y
        35.0
    """

    def __init__(self, backend: RenderBackend, config: LayoutConfig) -> None:
        self.backend = backend
        self.config = config
        self.cursor = Cursor()
        self.pages: List[PageState] = []
        self.placements: List[BlockPlacement] = []
        self.policy = PageBreakPolicy(config, backend, self.cursor, self.pages)
        self.registry = SectionRegistry(self.cursor)

    @property
    def page_index(self) -> int:
        return self.cursor.page_index

    @property
    def y(self) -> float:
        return self.cursor.y

    @property
    def section(self) -> str:
        return self.cursor.section

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def warnings(self) -> list[str]:
        return list(self.policy.warnings)

    @property
    def remaining_height(self) -> float:
        """Space left above the footer reserve on the current page."""
        if self.cursor.page_index < 0:
            return 0.0
        return max(0.0, self.config.body_bottom - self.cursor.y)

    # ─────────────────────────────────────────────────────────────────────
    # Flow
    # ─────────────────────────────────────────────────────────────────────

    def push(self, block: Block) -> None:
        """
        Place a block below the previous one, breaking the page if needed.

        Args:
            block: Block to measure and draw
        """
        width = self.config.content_width
        height = block.required_height(self.backend, width)
        self.policy.ensure_space(height, block.section)

        self.backend.set_page(self.cursor.page_index)
        block.draw(self.backend, self.config.margin_left, self.cursor.y, width)

        self.placements.append(BlockPlacement(
            label=block.label,
            page_index=self.cursor.page_index,
            top=self.cursor.y,
            height=height,
        ))
        self.cursor.y += height

    def push_all(self, blocks: Iterable[Block]) -> None:
        for block in blocks:
            self.push(block)

    def push_heading(self, block: Block, title: str, level: int = 1) -> TocEntry:
        """
        Push a section heading and record it for the table of contents.

        The entry takes the page the heading was drawn on, after any page
        break the heading itself caused.
        """
        self.push(block)
        return self.registry.record_section(title, level)

    def record_section(self, title: str, level: int = 1) -> TocEntry:
        """Record a section whose heading was placed with place_fixed()."""
        return self.registry.record_section(title, level)

    def ensure_space(self, height: float, section: Optional[str] = None) -> bool:
        """Break the page now unless ``height`` still fits (keeps rows together)."""
        return self.policy.ensure_space(height, section)

    def new_page(self, section: Optional[str] = None) -> int:
        """Start a new page unconditionally."""
        return self.policy.break_page(section)

    def close_page(self) -> None:
        """Mark the current page full so the next block starts a new page."""
        if self.cursor.page_index >= 0:
            self.cursor.y = max(self.cursor.y, self.config.body_bottom)

    def advance(self, dy: float) -> None:
        """Leave a vertical gap; the next push breaks the page if it ran out."""
        if dy < 0:
            raise ValueError(f"Cannot move the cursor backwards: {dy}")
        self.cursor.y += dy

    def move_to(self, y: float) -> None:
        """Reposition on the current page (below full-bleed banners)."""
        self.cursor.y = max(self.config.margin_top, y)

    def place_fixed(self, block: Block) -> None:
        """
        Draw a page-anchored block (cover art, banners) on the current page.

        The block draws at its own absolute coordinates and does not move
        the cursor.
        """
        if self.cursor.page_index < 0:
            self.policy.break_page(block.section)
        self.backend.set_page(self.cursor.page_index)
        block.draw(self.backend, 0.0, 0.0, self.config.page_width)
        logger.debug(f"Placed fixed block {block.label!r} on page {self.cursor.page_index}")
