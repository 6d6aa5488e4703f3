"""
Module: exporter.output.toc

Purpose:
    Two-pass table of contents.
    Page numbers are only known after content has been laid out, so the ToC
    pages are reserved (blank) at their place in the reading order and drawn
    once assembly is finished, from the entries the registry recorded.

Key Classes:
    - DeferredResolutionPass: Reserve, then resolve, the ToC pages

Algorithm:
    1. reserve(): open ceil(estimate / entries_per_page) pages, at least one,
       and close the last so the next block starts a fresh page
    2. Assembly continues on later pages; headings record ToC entries
    3. resolve(): select each reserved page, draw the title and rows
    4. Entries beyond the reserved capacity are dropped with a warning;
       resolve() never creates pages, so no recorded page number shifts

Dependencies:
    - exporter.layout.config: LayoutConfig
    - exporter.layout.models: TocEntry
    - exporter.output.backend: RenderBackend

Used By:
    - exporter.controller: Generation pass
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable, List, Optional

from capdoc_toolkit.exporter.layout.config import LayoutConfig
from capdoc_toolkit.exporter.layout.models import TocEntry

from .backend import RenderBackend

if TYPE_CHECKING:
    from capdoc_toolkit.exporter.layout.cursor import LayoutCursor

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

TOC_SECTION = "Table of Contents"
TITLE_SIZE = 18
TITLE_GAP = 15.0
ROW_STEP = 6.0
LEVEL_INDENT = 8.0
MAX_TITLE_CHARS = 50

PRIMARY_TEXT: RGB = (30, 41, 59)
SECONDARY_TEXT: RGB = (51, 65, 85)
MUTED_TEXT: RGB = (71, 85, 105)


class DeferredResolutionPass:
    """
    Reserves ToC pages during assembly and fills them afterwards.

    Args:
        config: Page geometry (capacity and positions)
        title: Heading drawn on every reserved page
        title_color: Heading colour (the branding secondary colour)
        max_level: Deepest entry level listed, None for all

    Example:
        >>> toc = DeferredResolutionPass(LayoutConfig())
        >>> toc.reserve(layout, entry_estimate=40)
        >>> ...  # assemble content
        >>> toc.resolve(backend, layout.registry.entries)
        38
    """

    def __init__(
        self,
        config: LayoutConfig,
        *,
        title: str = TOC_SECTION,
        title_color: RGB = SECONDARY_TEXT,
        max_level: Optional[int] = None,
    ) -> None:
        self.config = config
        self.title = title
        self.title_color = title_color
        self.max_level = max_level
        self.reserved_pages: List[int] = []
        self.warnings: List[str] = []

    @property
    def entries_per_page(self) -> int:
        """Rows that fit between the title and the footer reserve."""
        available = self.config.body_bottom - self.config.margin_top - TITLE_GAP
        return max(1, int(available // ROW_STEP) + 1)

    @property
    def capacity(self) -> int:
        return len(self.reserved_pages) * self.entries_per_page

    def pages_needed(self, entry_estimate: int) -> int:
        return max(1, math.ceil(entry_estimate / self.entries_per_page))

    def reserve(self, cursor: LayoutCursor, entry_estimate: int) -> List[int]:
        """
        Open blank pages for the ToC at the cursor's position in the document.

        Args:
            cursor: Layout cursor; the reserved pages become the current pages
            entry_estimate: Upper bound on the number of listed entries

        Returns:
            Indices of the reserved pages
        """
        if self.reserved_pages:
            raise RuntimeError("ToC pages already reserved")
        for _ in range(self.pages_needed(entry_estimate)):
            self.reserved_pages.append(cursor.new_page(self.title))
        # Content after the ToC must not land on a reserved page
        cursor.close_page()
        logger.info(
            f"Reserved {len(self.reserved_pages)} ToC page(s) for ~{entry_estimate} entries "
            f"(pages {[i + 1 for i in self.reserved_pages]})"
        )
        return list(self.reserved_pages)

    def resolve(self, backend: RenderBackend, entries: Iterable[TocEntry]) -> int:
        """
        Draw the ToC onto the reserved pages.

        Args:
            backend: Backend holding the reserved pages
            entries: Recorded entries in reading order

        Returns:
            Number of rows drawn
        """
        if not self.reserved_pages:
            logger.debug("No ToC pages reserved; nothing to resolve")
            return 0

        listed = [e for e in entries if self.max_level is None or e.level <= self.max_level]
        per_page = self.entries_per_page

        drawn = 0
        for page_slot, page_index in enumerate(self.reserved_pages):
            backend.set_page(page_index)
            self._draw_title(backend)
            for row, entry in enumerate(listed[page_slot * per_page:(page_slot + 1) * per_page]):
                self._draw_row(backend, entry, self.config.margin_top + TITLE_GAP + row * ROW_STEP)
                drawn += 1

        dropped = len(listed) - drawn
        if dropped > 0:
            message = (
                f"Table of contents overflow: {dropped} of {len(listed)} entries dropped "
                f"({len(self.reserved_pages)} page(s) reserved)"
            )
            logger.warning(message)
            self.warnings.append(message)

        logger.info(f"Resolved ToC with {drawn} entries")
        return drawn

    def _draw_title(self, backend: RenderBackend) -> None:
        backend.text(
            self.title,
            self.config.margin_left,
            self.config.margin_top,
            size=TITLE_SIZE,
            style="bold",
            color=self.title_color,
        )

    def _draw_row(self, backend: RenderBackend, entry: TocEntry, y: float) -> None:
        top_level = entry.level == 1
        size = 11 if top_level else 10
        backend.text(
            truncate_title(entry.title),
            self.config.margin_left + (entry.level - 1) * LEVEL_INDENT,
            y,
            size=size,
            style="bold" if top_level else "normal",
            color=PRIMARY_TEXT if top_level else SECONDARY_TEXT,
        )
        backend.text(
            str(entry.page_number),
            self.config.page_width - self.config.margin_right,
            y,
            size=size,
            color=MUTED_TEXT,
            align="right",
        )


def truncate_title(title: str) -> str:
    """Shorten a ToC title to 50 characters (47 + "...")."""
    if len(title) <= MAX_TITLE_CHARS:
        return title
    return title[:MAX_TITLE_CHARS - 3] + "..."
