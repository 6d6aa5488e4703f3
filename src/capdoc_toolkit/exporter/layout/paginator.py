"""
Module: exporter.layout.paginator

Purpose:
    Decide when content needs a fresh page.
    Blocks are placed strictly top-to-bottom; a block that does not fit
    above the footer reserve moves, whole, to the top of a new page.

Key Classes:
    - PageBreakPolicy: Space check and page creation

Algorithm:
    1. If no page exists yet, open one
    2. If cursor.y + height > page_height - margin_bottom - reserve_footer_space,
       open a new page and reset y to the top margin
    3. A block taller than a whole page on an already-fresh page is placed
       anyway and overflows (logged, never raised)

Dependencies:
    - exporter.layout.config: LayoutConfig
    - exporter.layout.models: Cursor, PageState

Used By:
    - exporter.layout.cursor: Every push
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from .config import LayoutConfig
from .models import Cursor, PageState

if TYPE_CHECKING:
    from capdoc_toolkit.exporter.output.backend import RenderBackend

logger = logging.getLogger(__name__)


class PageBreakPolicy:
    """
    Page break decisions for a single generation pass.

    Shares the cursor and page list with LayoutCursor; it is the only
    component that creates pages during assembly. Page indices only grow.

    Args:
        config: Page geometry
        backend: Page factory
        cursor: Shared write position
        pages: Shared per-page state, appended as pages are created
    """

    def __init__(
        self,
        config: LayoutConfig,
        backend: RenderBackend,
        cursor: Cursor,
        pages: List[PageState],
    ) -> None:
        self.config = config
        self.backend = backend
        self.cursor = cursor
        self.pages = pages
        self.warnings: List[str] = []

    def ensure_space(self, height: float, section: Optional[str] = None) -> bool:
        """
        Make sure ``height`` fits below the cursor, breaking the page if not.

        Args:
            height: Required vertical extent (mm)
            section: Label for the new page, defaults to the current one

        Returns:
            True if a new page was created
        """
        if self.cursor.page_index < 0:
            self.break_page(section)
            self._warn_if_oversized(height)
            return True

        if self.cursor.y + height <= self.config.body_bottom:
            return False

        if self._at_page_top():
            # Fresh page already; another one would not help
            self._warn_if_oversized(height)
            return False

        self.break_page(section)
        self._warn_if_oversized(height)
        return True

    def break_page(self, section: Optional[str] = None) -> int:
        """
        Open a new page unconditionally and move the cursor to its top margin.

        Args:
            section: Label for the new page, defaults to the current one

        Returns:
            Index of the new page
        """
        label = section or self.cursor.section
        index = self.backend.add_page()
        if index != len(self.pages) or index <= self.cursor.page_index:
            raise RuntimeError(
                f"Backend returned page {index}, expected {len(self.pages)}"
            )
        self.pages.append(PageState(index=index, section=label))

        self.cursor.page_index = index
        self.cursor.y = self.config.margin_top
        self.cursor.section = label

        logger.debug(f"Opened page {index} ({label or 'untitled'})")
        return index

    def _at_page_top(self) -> bool:
        return self.cursor.y <= self.config.margin_top

    def _warn_if_oversized(self, height: float) -> None:
        if height > self.config.usable_height:
            message = (
                f"Block overflows page {self.cursor.page_index}: "
                f"{height:.1f}mm needed, {self.config.usable_height:.1f}mm available"
            )
            logger.warning(message)
            self.warnings.append(message)
