"""
Module: exporter.output.decorations

Purpose:
    Final pass stamping headers, footers, page numbers and watermarks.
    Runs once every page exists, so "Page N of M" uses the real total.
    Works purely from page geometry and the settings; it never touches
    the layout cursor.

Key Classes:
    - DecorationPass: Decorates every page of a backend

Key Functions:
    - format_page_number(): Page number text for a format key
    - resolve_watermark(): Watermark text and opacity from branding settings

Dependencies:
    - exporter.settings: PrintSettings, CLASSIFICATION_WATERMARKS
    - exporter.layout.config: LayoutConfig
    - exporter.output.backend: RenderBackend, load_image
    - reportlab: ImageReader for the cached header logo

Used By:
    - exporter.controller: Generation pass
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from capdoc_toolkit.exporter.layout.config import LayoutConfig
from capdoc_toolkit.exporter.layout.models import PageState
from capdoc_toolkit.exporter.settings import CLASSIFICATION_WATERMARKS, PrintSettings

from reportlab.lib.utils import ImageReader

from .backend import BackendError, RenderBackend, load_image

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

HEADER_OFFSET = 10.0
FOOTER_OFFSET = 10.0
FOOTER_RULE_COLOR: RGB = (200, 200, 200)
FOOTER_TEXT_COLOR: RGB = (71, 85, 105)
WATERMARK_COLOR: RGB = (150, 150, 150)
WATERMARK_SIZE = 50
WATERMARK_ANGLE = 45.0
LOGO_HEIGHT = 8.0


def format_page_number(fmt: str, number: int, total: int) -> str:
    """
    Page number text.

    Args:
        fmt: "simple", "page", "pageOf" or "pageOfTotal"
        number: Printed 1-based page number
        total: Total page count

    Example:
        >>> format_page_number("pageOf", 4, 10)
        'Page 4 of 10'
    """
    if fmt == "simple":
        return str(number)
    if fmt == "page":
        return f"Page {number}"
    return f"Page {number} of {total}"


def resolve_watermark(settings: PrintSettings) -> Optional[tuple[str, float]]:
    """
    Watermark text and opacity, or None when nothing should be stamped.

    Classification watermarks take their text and opacity from the
    classification table; custom and date-based ones use the branding
    opacity. A date-based watermark without an expiry date is skipped.
    """
    branding = settings.branding
    kind = branding.watermark_type
    if kind == "classification":
        mark = settings.classification_watermark
        text, opacity = mark.text, mark.opacity
    elif kind == "custom":
        text, opacity = branding.watermark_text, branding.watermark_opacity
    elif kind == "date-based" and branding.watermark_expiry_date:
        text, opacity = f"Valid until: {branding.watermark_expiry_date}", branding.watermark_opacity
    else:
        return None
    if not text:
        return None
    return text, opacity


class DecorationPass:
    """
    Headers, footers and watermarks for every page.

    The cover (page index 0 when a cover is included) gets the watermark
    only. Applying the pass twice draws the same content twice.

    Args:
        settings: Print settings (header/footer, branding, document)
        config: Page geometry
        print_date: Date shown as "Printed: YYYY-MM-DD"
    """

    def __init__(self, settings: PrintSettings, config: LayoutConfig, print_date: date) -> None:
        self.settings = settings
        self.config = config
        self.print_date = print_date
        self.watermark = resolve_watermark(settings)
        self.logo = self._load_logo()

    @property
    def header_y(self) -> float:
        return self.config.margin_top - HEADER_OFFSET

    @property
    def footer_y(self) -> float:
        return self.config.page_height - self.config.margin_bottom + FOOTER_OFFSET

    def apply_all(self, backend: RenderBackend, pages: Sequence[PageState] = ()) -> None:
        """
        Decorate every page of the backend.

        Args:
            backend: Backend with all pages created
            pages: Per-page section labels from assembly (index-aligned)
        """
        total = backend.page_count
        labels = {page.index: page.section for page in pages}
        has_cover = self.settings.document.include_cover

        for index in range(total):
            backend.set_page(index)
            if index == 0 and has_cover:
                self.draw_watermark(backend)
                continue
            is_odd_page = (index + 1) % 2 == 1
            self.draw_header(backend, labels.get(index, ""), is_odd_page)
            self.draw_footer(backend, index + 1, total)
            self.draw_watermark(backend)

        logger.info(f"Decorated {total} pages")

    # ─────────────────────────────────────────────────────────────────────
    # Header
    # ─────────────────────────────────────────────────────────────────────

    def draw_header(self, backend: RenderBackend, section: str, is_odd_page: bool) -> None:
        headers = self.settings.headers
        if not headers.include_headers or headers.header_style == "none":
            return

        config = self.config
        y = self.header_y
        if headers.header_style != "branded":
            backend.text(headers.header_content, config.margin_left, y, size=8, color=FOOTER_TEXT_COLOR)
            return

        color = self.settings.branding.secondary_rgb
        left, right = config.margin_left, config.page_width - config.margin_right
        version = f"v{self.settings.document.version}"

        if headers.show_section_name and section:
            backend.text(section, config.center_x, y, size=9, color=color, align="center")

        if headers.use_alternating_headers and not is_odd_page:
            if headers.show_version_in_header:
                backend.text(version, left, y, size=9, style="bold", color=color)
            backend.text(headers.header_content, right, y, size=9, style="bold", color=color, align="right")
        else:
            content_x = left + self._draw_logo(backend, left, y)
            backend.text(headers.header_content, content_x, y, size=9, style="bold", color=color)
            if headers.show_version_in_header:
                backend.text(version, right, y, size=9, style="bold", color=color, align="right")

        if headers.show_header_accent_line:
            backend.line(left, y + 3, right, y + 3, color=self.settings.branding.primary_rgb, width=0.5)

    def _load_logo(self) -> Optional[ImageReader]:
        """Decode the header logo once; an unreadable file means no logo."""
        logo_path = self.settings.branding.logo_path
        if not self.settings.headers.show_logo or not logo_path:
            return None
        try:
            return load_image(logo_path)
        except BackendError as e:
            logger.warning(f"Header logo skipped: {e}")
            return None

    def _draw_logo(self, backend: RenderBackend, x: float, baseline: float) -> float:
        """Draw the logo left of the header text; returns the horizontal space used."""
        if self.logo is None:
            return 0.0
        backend.image(self.logo, x, baseline - LOGO_HEIGHT + 1.5, LOGO_HEIGHT * 2, LOGO_HEIGHT)
        return LOGO_HEIGHT * 2 + 3

    # ─────────────────────────────────────────────────────────────────────
    # Footer
    # ─────────────────────────────────────────────────────────────────────

    def draw_footer(self, backend: RenderBackend, number: int, total: int) -> None:
        headers = self.settings.headers
        if not headers.include_footers:
            return

        config = self.config
        document = self.settings.document
        y = self.footer_y
        left, right = config.margin_left, config.page_width - config.margin_right

        if headers.show_footer_accent_line:
            backend.line(left, y - 5, right, y - 5, color=FOOTER_RULE_COLOR, width=0.3)

        mark = CLASSIFICATION_WATERMARKS.get(document.classification)
        left_text = (mark.footer_text if mark else "") or headers.footer_content
        if left_text:
            backend.text(left_text, left, y, size=8, color=FOOTER_TEXT_COLOR)

        center_parts = []
        if headers.show_document_id and document.document_id:
            center_parts.append(document.document_id)
        if headers.show_print_date:
            center_parts.append(f"Printed: {self.print_date.isoformat()}")
        position = headers.page_number_position
        numbered_center = headers.include_page_numbers and position == "center"
        if center_parts:
            # A centred page number takes the middle slot; id and date move right
            x, align = (right, "right") if numbered_center else (config.center_x, "center")
            backend.text(" | ".join(center_parts), x, y, size=8, color=FOOTER_TEXT_COLOR, align=align)

        if headers.include_page_numbers:
            x = {"left": left, "center": config.center_x}.get(position, right)
            align = position if position in ("left", "center") else "right"
            backend.text(
                format_page_number(headers.page_number_format, number, total),
                x, y, size=8, color=FOOTER_TEXT_COLOR, align=align,
            )

        if headers.show_copyright and document.copyright_holder:
            backend.text(
                f"© {document.copyright_year} {document.copyright_holder}. All rights reserved.",
                config.center_x, y + 4, size=7, color=FOOTER_TEXT_COLOR, align="center",
            )

    # ─────────────────────────────────────────────────────────────────────
    # Watermark
    # ─────────────────────────────────────────────────────────────────────

    def draw_watermark(self, backend: RenderBackend) -> None:
        if self.watermark is None:
            return
        text, opacity = self.watermark
        backend.text(
            text,
            self.config.center_x,
            self.config.page_height / 2,
            size=WATERMARK_SIZE,
            style="bold",
            color=WATERMARK_COLOR,
            align="center",
            angle=WATERMARK_ANGLE,
            opacity=opacity,
        )
