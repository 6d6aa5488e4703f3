"""
Module: exporter.output.backend

Purpose:
    Drawing and measurement collaborator for the layout engine.
    The engine addresses pages by index and may revisit earlier pages (the
    ToC page is drawn after all content). ReportLab's canvas is strictly
    sequential, so ReportLabBackend records draw operations per page and
    replays them onto a canvas only when the document is serialized.

Key Classes:
    - RenderBackend: Abstract drawing/measurement interface
    - ReportLabBackend: Recording backend serializing to PDF bytes
    - DrawOp: One recorded drawing primitive
    - BackendError / PageIndexError: Fatal backend failures

Key Functions:
    - load_image(): Decode an image file once for reuse across pages

Dependencies:
    - reportlab: Text metrics and PDF generation
    - PIL: Logo image loading

Used By:
    - exporter.layout.cursor: Block drawing and measurement
    - exporter.output.toc: Deferred ToC rendering
    - exporter.output.decorations: Headers, footers, watermarks
    - exporter.controller: Document serialization
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

# Points to millimetres for font sizes
PT_TO_MM = 25.4 / 72.0
DEFAULT_LINE_SPACING = 1.25

FONT_NAMES: dict[str, str] = {
    "normal": "Helvetica",
    "bold": "Helvetica-Bold",
    "italic": "Helvetica-Oblique",
    "bolditalic": "Helvetica-BoldOblique",
}

ALIGNMENTS = ("left", "center", "right")

ImageSource = Union[str, Path, ImageReader]


class BackendError(Exception):
    """Drawing, measurement or serialization failed."""
    pass


class PageIndexError(BackendError):
    """Page index does not exist."""
    pass


class RenderBackend(ABC):
    """
    Abstract drawing and measurement interface.

    Coordinates are millimetres from the top-left corner. Drawing calls
    target the currently selected page; ``add_page`` appends a page and
    selects it, ``set_page`` re-selects an existing page.
    """

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages created so far."""

    @property
    @abstractmethod
    def current_page(self) -> int:
        """Index of the selected page, -1 before the first page."""

    @abstractmethod
    def add_page(self) -> int:
        """
        Append a blank page and select it.

        Returns:
            Index of the new page
        """

    @abstractmethod
    def set_page(self, index: int) -> None:
        """
        Select an existing page for further drawing.

        Raises:
            PageIndexError: If the page does not exist
        """

    @abstractmethod
    def text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        size: float = 10,
        style: str = "normal",
        color: RGB = (0, 0, 0),
        align: str = "left",
        angle: float = 0.0,
        opacity: float = 1.0,
    ) -> None:
        """Draw one line of text with its baseline at ``y``."""

    @abstractmethod
    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[RGB] = None,
        stroke: Optional[RGB] = None,
        line_width: float = 0.3,
        radius: float = 0.0,
    ) -> None:
        """Draw a (rounded) rectangle with its top-left corner at (x, y)."""

    @abstractmethod
    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: RGB = (0, 0, 0),
        width: float = 0.3,
    ) -> None:
        """Draw a straight line."""

    @abstractmethod
    def image(self, source: ImageSource, x: float, y: float, width: float, height: float) -> None:
        """Draw an image file, or an image loaded with load_image(), scaled into the given box."""

    @abstractmethod
    def text_width(self, text: str, *, size: float = 10, style: str = "normal") -> float:
        """Width of ``text`` in mm."""

    @abstractmethod
    def wrap_text(self, text: str, width: float, *, size: float = 10, style: str = "normal") -> list[str]:
        """Split ``text`` into lines no wider than ``width`` mm."""

    @abstractmethod
    def serialize(self) -> bytes:
        """Encode all pages as a binary document."""

    def line_height(self, size: float, spacing: float = DEFAULT_LINE_SPACING) -> float:
        """Baseline-to-baseline distance in mm for a font size in points."""
        return size * PT_TO_MM * spacing


@dataclass(frozen=True)
class DrawOp:
    """
    One recorded drawing primitive.

    Attributes:
        kind: "text", "rect", "line" or "image"
        page_index: Page the primitive was drawn on
        x: X position (mm)
        y: Y position (mm, top-down)
        text: Text content (text ops only)
        width: Width (rect/image) or end x (line)
        height: Height (rect/image) or end y (line)
        options: Styling (size, style, color, align, angle, opacity, fill ...)
    """

    kind: str
    page_index: int
    x: float
    y: float
    text: str = ""
    width: float = 0.0
    height: float = 0.0
    options: dict[str, Any] = field(default_factory=dict, compare=False)


class ReportLabBackend(RenderBackend):
    """
    Recording backend that serializes to PDF with ReportLab.

    Args:
        page_width: Page width in mm
        page_height: Page height in mm
        title: PDF metadata title
        author: PDF metadata author

    Example:
        >>> backend = ReportLabBackend(210, 297)
        >>> backend.add_page()
        0
        >>> backend.text("Hello", 20, 30)
        >>> backend.serialize()[:4]
        b'%PDF'
    """

    def __init__(
        self,
        page_width: float,
        page_height: float,
        *,
        title: str = "",
        author: str = "",
    ) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self.title = title
        self.author = author
        self._pages: list[list[DrawOp]] = []
        self._current = -1

    # ─────────────────────────────────────────────────────────────────────
    # Pages
    # ─────────────────────────────────────────────────────────────────────

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def current_page(self) -> int:
        return self._current

    def add_page(self) -> int:
        self._pages.append([])
        self._current = len(self._pages) - 1
        return self._current

    def set_page(self, index: int) -> None:
        if not 0 <= index < len(self._pages):
            raise PageIndexError(f"Page {index} does not exist ({len(self._pages)} pages)")
        self._current = index

    def operations(self, page_index: Optional[int] = None) -> tuple[DrawOp, ...]:
        """Recorded operations for one page, or for all pages in order."""
        if page_index is None:
            return tuple(op for ops in self._pages for op in ops)
        if not 0 <= page_index < len(self._pages):
            raise PageIndexError(f"Page {page_index} does not exist ({len(self._pages)} pages)")
        return tuple(self._pages[page_index])

    def texts(self, page_index: int) -> list[str]:
        """Text content drawn on a page, in drawing order."""
        return [op.text for op in self.operations(page_index) if op.kind == "text"]

    def _record(self, op_kind: str, x: float, y: float, **kwargs: Any) -> None:
        if self._current < 0:
            raise PageIndexError("No page selected; call add_page() first")
        text = kwargs.pop("text", "")
        width = kwargs.pop("width", 0.0)
        height = kwargs.pop("height", 0.0)
        self._pages[self._current].append(
            DrawOp(op_kind, self._current, x, y, text=text, width=width, height=height, options=kwargs)
        )

    # ─────────────────────────────────────────────────────────────────────
    # Drawing
    # ─────────────────────────────────────────────────────────────────────

    def text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        size: float = 10,
        style: str = "normal",
        color: RGB = (0, 0, 0),
        align: str = "left",
        angle: float = 0.0,
        opacity: float = 1.0,
    ) -> None:
        _font_name(style)
        if align not in ALIGNMENTS:
            raise BackendError(f"Unknown text alignment: {align!r}")
        self._record(
            "text", x, y,
            text=text, size=size, style=style, color=color,
            align=align, angle=angle, opacity=opacity,
        )

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[RGB] = None,
        stroke: Optional[RGB] = None,
        line_width: float = 0.3,
        radius: float = 0.0,
    ) -> None:
        self._record(
            "rect", x, y,
            width=width, height=height, fill=fill, stroke=stroke,
            line_width=line_width, radius=radius,
        )

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: RGB = (0, 0, 0),
        width: float = 0.3,
    ) -> None:
        self._record("line", x1, y1, width=x2, height=y2, color=color, line_width=width)

    def image(self, source: ImageSource, x: float, y: float, width: float, height: float) -> None:
        reader = source if isinstance(source, ImageReader) else load_image(source)
        self._record("image", x, y, width=width, height=height, reader=reader)

    # ─────────────────────────────────────────────────────────────────────
    # Measurement
    # ─────────────────────────────────────────────────────────────────────

    def text_width(self, text: str, *, size: float = 10, style: str = "normal") -> float:
        return pdfmetrics.stringWidth(text, _font_name(style), size) / mm

    def wrap_text(self, text: str, width: float, *, size: float = 10, style: str = "normal") -> list[str]:
        if not text:
            return []
        if width <= 0:
            raise BackendError(f"Cannot wrap text to non-positive width: {width}")
        return simpleSplit(text, _font_name(style), size, width * mm)

    # ─────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────

    def serialize(self) -> bytes:
        """
        Replay all recorded pages onto a ReportLab canvas.

        Returns:
            PDF document bytes
        """
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=(self.page_width * mm, self.page_height * mm))
        if self.title:
            c.setTitle(self.title)
        if self.author:
            c.setAuthor(self.author)

        for ops in self._pages:
            for op in ops:
                self._replay(c, op)
            c.showPage()

        c.save()
        logger.info(f"Serialized {self.page_count} pages ({buf.tell()} bytes)")
        return buf.getvalue()

    def _flip(self, y_mm: float) -> float:
        """Convert a top-down mm y to bottom-up PDF points."""
        return (self.page_height - y_mm) * mm

    def _replay(self, c: canvas.Canvas, op: DrawOp) -> None:
        opts = op.options
        c.saveState()
        if op.kind == "text":
            c.setFont(_font_name(opts["style"]), opts["size"])
            c.setFillColorRGB(*_unit_rgb(opts["color"]))
            if opts["opacity"] < 1.0:
                c.setFillAlpha(opts["opacity"])
            x_pt, y_pt = op.x * mm, self._flip(op.y)
            if opts["angle"]:
                c.translate(x_pt, y_pt)
                c.rotate(opts["angle"])
                x_pt = y_pt = 0
            draw = {
                "left": c.drawString,
                "center": c.drawCentredString,
                "right": c.drawRightString,
            }[opts["align"]]
            draw(x_pt, y_pt, op.text)
        elif op.kind == "rect":
            fill, stroke = opts["fill"], opts["stroke"]
            if fill is not None:
                c.setFillColorRGB(*_unit_rgb(fill))
            if stroke is not None:
                c.setStrokeColorRGB(*_unit_rgb(stroke))
                c.setLineWidth(opts["line_width"] * mm)
            x_pt, y_pt = op.x * mm, self._flip(op.y + op.height)
            w_pt, h_pt = op.width * mm, op.height * mm
            flags = {"stroke": int(stroke is not None), "fill": int(fill is not None)}
            if opts["radius"] > 0:
                c.roundRect(x_pt, y_pt, w_pt, h_pt, opts["radius"] * mm, **flags)
            else:
                c.rect(x_pt, y_pt, w_pt, h_pt, **flags)
        elif op.kind == "line":
            c.setStrokeColorRGB(*_unit_rgb(opts["color"]))
            c.setLineWidth(opts["line_width"] * mm)
            c.line(op.x * mm, self._flip(op.y), op.width * mm, self._flip(op.height))
        elif op.kind == "image":
            c.drawImage(
                opts["reader"],
                op.x * mm,
                self._flip(op.y + op.height),
                width=op.width * mm,
                height=op.height * mm,
                preserveAspectRatio=True,
                mask="auto",
            )
        c.restoreState()


def _font_name(style: str) -> str:
    try:
        return FONT_NAMES[style]
    except KeyError:
        raise BackendError(f"Unknown font style: {style!r}") from None


def _unit_rgb(color: RGB) -> tuple[float, float, float]:
    r, g, b = color
    return r / 255.0, g / 255.0, b / 255.0


def load_image(path: Union[str, Path]) -> ImageReader:
    """
    Open an image file once so it can be drawn on many pages.

    Raises:
        BackendError: If the file is missing or not a readable image
    """
    try:
        with Image.open(path) as img:
            return _pil_to_reader(img)
    except OSError as e:
        raise BackendError(f"Cannot load image {path}: {e}") from e


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)
