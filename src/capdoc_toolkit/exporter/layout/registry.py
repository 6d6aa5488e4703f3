"""
Module: exporter.layout.registry

Purpose:
    Append-only log of navigable sections for the table of contents.
    Each entry captures the page a section heading was actually drawn on,
    at the moment it was drawn.

Key Classes:
    - SectionRegistry: ToC entry log

Used By:
    - exporter.layout.cursor: push_heading / record_section
    - exporter.output.toc: Deferred ToC rendering
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import Cursor, TocEntry

logger = logging.getLogger(__name__)


class SectionRegistry:
    """
    Records (title, level, page_index) for every rendered section.

    Repeated titles are recorded as separate entries.
    """

    def __init__(self, cursor: Cursor) -> None:
        self._cursor = cursor
        self._entries: List[TocEntry] = []

    def record_section(self, title: str, level: int) -> TocEntry:
        """
        Record a section on the cursor's current page.

        Raises:
            ValueError: If no page has been opened yet, or level < 1
        """
        if self._cursor.page_index < 0:
            raise ValueError(f"Cannot record section {title!r} before the first page")
        entry = TocEntry(title=title, level=level, page_index=self._cursor.page_index)
        self._entries.append(entry)
        logger.debug(f"ToC entry L{level} {title!r} -> page {entry.page_number}")
        return entry

    @property
    def entries(self) -> tuple[TocEntry, ...]:
        return tuple(self._entries)

    def filtered(self, max_level: Optional[int] = None) -> tuple[TocEntry, ...]:
        """Entries at or above ``max_level`` (all entries when None)."""
        if max_level is None:
            return self.entries
        return tuple(e for e in self._entries if e.level <= max_level)

    def pages_of(self, title: str) -> list[int]:
        """Page indices recorded for a title, in recording order."""
        return [e.page_index for e in self._entries if e.title == title]

    def __len__(self) -> int:
        return len(self._entries)
