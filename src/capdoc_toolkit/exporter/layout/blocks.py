"""
Module: exporter.layout.blocks

Purpose:
    Block constructors for the capabilities document.
    Each helper returns a Block (or a list of Blocks) whose draw action
    renders relative to the block's top-left corner and the content width
    handed in by the cursor. Nothing here knows about pages.

Key Functions:
    - spacer_block(), text_block(), heading_block(): Single-line primitives
    - paragraph_block(), paragraph_blocks(): Wrapped text
    - bullet_list_blocks(), key_value_block(), table_row_block(): Lists and rows
    - labeled_box_block(), badge_row_block(): Coloured callouts
    - stat_boxes_block(), card_row_block(), outcome_row_block(),
      persona_row_block(), category_columns_block(), text_columns_block():
      Multi-column rows
    - module_header_block(), banner_block(), definition_block()

Dependencies:
    - exporter.layout.models: Block
    - exporter.output.backend: Point/mm conversion

Used By:
    - exporter.sections: Section assembly
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Union

from capdoc_toolkit.exporter.output.backend import DEFAULT_LINE_SPACING, PT_TO_MM

from .models import Block

if TYPE_CHECKING:
    from capdoc_toolkit.exporter.output.backend import RenderBackend

RGB = tuple[int, int, int]

TEXT_COLORS: dict[str, RGB] = {
    "primary": (30, 41, 59),
    "secondary": (51, 65, 85),
    "muted": (71, 85, 105),
    "light": (100, 116, 139),
}

PANEL_FILL: RGB = (249, 250, 251)
WHITE: RGB = (255, 255, 255)

# Baseline sits this fraction of the font size below the line top
ASCENT_RATIO = 0.8


@dataclass(frozen=True)
class BoxPalette:
    """Colours of a labelled callout box."""

    fill: RGB
    stroke: RGB
    title: RGB
    text: RGB = TEXT_COLORS["muted"]


CHALLENGE_PALETTE = BoxPalette(fill=(254, 242, 242), stroke=(239, 68, 68), title=(220, 38, 38), text=(127, 29, 29))
PROMISE_PALETTE = BoxPalette(fill=(239, 246, 255), stroke=(59, 130, 246), title=(37, 99, 235), text=(30, 64, 175))
AI_PALETTE = BoxPalette(fill=(250, 245, 255), stroke=(168, 85, 247), title=(168, 85, 247))
INTEGRATION_PALETTE = BoxPalette(fill=(240, 253, 244), stroke=(34, 197, 94), title=(34, 197, 94))
REGIONAL_PALETTE = BoxPalette(fill=(239, 246, 255), stroke=(59, 130, 246), title=(59, 130, 246), text=(30, 64, 175))
REGION_BADGE_FILL: RGB = (219, 234, 254)

BoxItem = Union[str, tuple[str, str]]


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, ending in "..." when shortened."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def _ascent(size: float) -> float:
    return size * PT_TO_MM * ASCENT_RATIO


def _line_step(size: float, spacing: float = DEFAULT_LINE_SPACING) -> float:
    return size * PT_TO_MM * spacing


def _noop(backend: RenderBackend, x: float, y: float, width: float) -> None:
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Single-line primitives
# ─────────────────────────────────────────────────────────────────────────────

def spacer_block(height: float, *, section: Optional[str] = None) -> Block:
    """Empty vertical gap that still moves to a new page when it does not fit."""
    return Block(draw=_noop, height=height, section=section, label="spacer")


def text_block(
    text: str,
    *,
    size: float = 10,
    style: str = "normal",
    color: RGB = TEXT_COLORS["primary"],
    indent: float = 0.0,
    align: str = "left",
    height: Optional[float] = None,
    section: Optional[str] = None,
    label: Optional[str] = None,
) -> Block:
    """
    One line of text.

    Args:
        text: Line content (never wrapped)
        size: Font size in points
        indent: Offset from the left edge for left-aligned text (mm)
        align: "left", "center" (on the content width) or "right"
        height: Block height, defaults to one line step
    """
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        anchor = {"left": x + indent, "center": x + width / 2, "right": x + width}[align]
        backend.text(text, anchor, y + _ascent(size), size=size, style=style, color=color, align=align)

    return Block(
        draw=draw,
        height=_line_step(size) if height is None else height,
        section=section,
        label=label or f"text:{truncate(text, 30)}",
    )


def heading_block(
    text: str,
    *,
    size: float = 18,
    color: RGB = TEXT_COLORS["primary"],
    space_after: float = 15.0,
    align: str = "left",
    section: Optional[str] = None,
) -> Block:
    """Bold title line followed by ``space_after`` mm of white space."""
    return text_block(
        text,
        size=size,
        style="bold",
        color=color,
        align=align,
        height=space_after,
        section=section,
        label=f"heading:{truncate(text, 30)}",
    )


def rule_block(
    *,
    color: RGB = (200, 200, 200),
    line_width: float = 0.5,
    space_after: float = 10.0,
    section: Optional[str] = None,
) -> Block:
    """Horizontal rule across the content width."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        backend.line(x, y, x + width, y, color=color, width=line_width)

    return Block(draw=draw, height=space_after, section=section, label="rule")


# ─────────────────────────────────────────────────────────────────────────────
# Wrapped text
# ─────────────────────────────────────────────────────────────────────────────

def paragraph_block(
    text: str,
    *,
    size: float = 9,
    style: str = "normal",
    color: RGB = TEXT_COLORS["secondary"],
    indent: float = 0.0,
    space_after: float = 0.0,
    section: Optional[str] = None,
) -> Block:
    """
    Wrapped paragraph kept together on one page.

    The height is measured at push time by wrapping to the content width
    minus ``indent``.
    """
    def lines(backend: RenderBackend, width: float) -> list[str]:
        return backend.wrap_text(text, width - indent, size=size, style=style)

    def measure(backend: RenderBackend, width: float) -> float:
        return len(lines(backend, width)) * backend.line_height(size) + space_after

    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        step = backend.line_height(size)
        for i, line in enumerate(lines(backend, width)):
            backend.text(line, x + indent, y + _ascent(size) + i * step, size=size, style=style, color=color)

    return Block(draw=draw, measure=measure, section=section, label=f"paragraph:{truncate(text, 30)}")


def paragraph_blocks(
    backend: RenderBackend,
    text: str,
    width: float,
    *,
    size: float = 9,
    style: str = "normal",
    color: RGB = TEXT_COLORS["secondary"],
    indent: float = 0.0,
    space_after: float = 0.0,
    section: Optional[str] = None,
) -> list[Block]:
    """
    Wrapped paragraph as one block per line, so it may continue on the next page.

    Args:
        backend: Measures the text
        text: Paragraph content
        width: Content width the paragraph is laid out in (mm)
    """
    step = backend.line_height(size)
    blocks = [
        text_block(line, size=size, style=style, color=color, indent=indent, height=step, section=section)
        for line in backend.wrap_text(text, width - indent, size=size, style=style)
    ]
    if space_after:
        blocks.append(spacer_block(space_after, section=section))
    return blocks


def bullet_list_blocks(
    items: Sequence[str],
    *,
    bullet: str = "-",
    size: float = 8,
    color: RGB = TEXT_COLORS["secondary"],
    indent: float = 3.0,
    line_step: float = 4.0,
    limit: Optional[int] = None,
    section: Optional[str] = None,
) -> list[Block]:
    """One single-line block per item, prefixed with ``bullet``."""
    return [
        text_block(
            f"{bullet} {truncate(item, limit) if limit else item}",
            size=size,
            color=color,
            indent=indent,
            height=line_step,
            section=section,
        )
        for item in items
    ]


def definition_block(
    term: str,
    definition: str,
    *,
    term_width: float = 30.0,
    section: Optional[str] = None,
) -> Block:
    """Bold term with its definition wrapped in a column to the right."""
    def lines(backend: RenderBackend, width: float) -> list[str]:
        return backend.wrap_text(definition, width - term_width, size=9) or [""]

    def measure(backend: RenderBackend, width: float) -> float:
        return len(lines(backend, width)) * 4 + 4

    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        base = y + _ascent(10)
        backend.text(term, x, base, size=10, style="bold", color=TEXT_COLORS["primary"])
        for i, line in enumerate(lines(backend, width)):
            backend.text(line, x + term_width, base + i * 4, size=9, color=TEXT_COLORS["secondary"])

    return Block(draw=draw, measure=measure, section=section, label=f"definition:{term}")


# ─────────────────────────────────────────────────────────────────────────────
# Rows
# ─────────────────────────────────────────────────────────────────────────────

def key_value_block(
    label: str,
    value: str,
    *,
    value_offset: float = 50.0,
    label_offset: float = 0.0,
    size: float = 10,
    label_color: RGB = TEXT_COLORS["light"],
    value_color: RGB = TEXT_COLORS["primary"],
    label_style: str = "bold",
    value_style: str = "normal",
    height: float = 7.0,
    section: Optional[str] = None,
) -> Block:
    """Label and value on one line, the value starting at ``value_offset``."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        base = y + _ascent(size)
        backend.text(label, x + label_offset, base, size=size, style=label_style, color=label_color)
        backend.text(value, x + value_offset, base, size=size, style=value_style, color=value_color)

    return Block(draw=draw, height=height, section=section, label=f"row:{label}")


def table_row_block(
    cells: Sequence[str],
    offsets: Sequence[float],
    *,
    size: float = 9,
    style: str = "normal",
    color: RGB = TEXT_COLORS["primary"],
    fill: Optional[RGB] = None,
    height: float = 7.0,
    section: Optional[str] = None,
) -> Block:
    """
    Table row with cells at fixed column offsets.

    Raises:
        ValueError: If cells and offsets differ in length
    """
    if len(cells) != len(offsets):
        raise ValueError(f"{len(cells)} cells for {len(offsets)} columns")

    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        if fill is not None:
            backend.rect(x, y, width, 8, fill=fill)
        base = y + 4 + _ascent(size) / 2
        for cell, offset in zip(cells, offsets):
            backend.text(cell, x + offset, base, size=size, style=style, color=color)

    return Block(draw=draw, height=height, section=section, label=f"table:{'|'.join(cells)[:30]}")


def text_columns_block(
    items: Sequence[str],
    *,
    columns: int = 4,
    gap: float = 3.0,
    size: float = 8,
    bullet: str = "*",
    height: float = 10.0,
    section: Optional[str] = None,
) -> Block:
    """One row of short text items laid out in equal columns."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        col_width = (width - gap * (columns - 1)) / columns
        for i, item in enumerate(items[:columns]):
            backend.text(
                f"{bullet} {item}", x + i * (col_width + gap), y + _ascent(size),
                size=size, color=TEXT_COLORS["secondary"],
            )

    return Block(draw=draw, height=height, section=section, label="columns")


# ─────────────────────────────────────────────────────────────────────────────
# Callouts
# ─────────────────────────────────────────────────────────────────────────────

def labeled_box_block(
    title: str,
    items: Sequence[BoxItem],
    palette: BoxPalette,
    *,
    title_size: float = 10,
    text_size: float = 8,
    text_style: str = "normal",
    line_step: float = 5.0,
    max_lines: Optional[int] = None,
    badges: Sequence[str] = (),
    space_after: float = 5.0,
    section: Optional[str] = None,
) -> Block:
    """
    Rounded, outlined callout with a coloured title and a list of items.

    String items are wrapped to the box width (``max_lines`` caps each item).
    Tuple items are ``(label, text)`` pairs drawn on one line, the label in
    the title colour.
    """
    def lines(backend: RenderBackend, width: float) -> list[BoxItem]:
        result: list[BoxItem] = []
        for item in items:
            if isinstance(item, tuple):
                result.append(item)
                continue
            wrapped = backend.wrap_text(item, width - 6, size=text_size, style=text_style)
            result.extend(wrapped[:max_lines] if max_lines else wrapped)
        return result

    def box_height(backend: RenderBackend, width: float) -> float:
        return 10 + len(lines(backend, width)) * line_step + 2

    def measure(backend: RenderBackend, width: float) -> float:
        return box_height(backend, width) + space_after

    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        backend.rect(
            x - 2, y, width + 4, box_height(backend, width),
            fill=palette.fill, stroke=palette.stroke, line_width=0.3, radius=2,
        )
        backend.text(title, x + 2, y + 6, size=title_size, style="bold", color=palette.title)

        badge_x = x + 2 + backend.text_width(title, size=title_size, style="bold") + 6
        for badge in badges:
            badge_width = backend.text_width(badge, size=7) + 6
            backend.rect(badge_x, y + 2, badge_width, 6, fill=REGION_BADGE_FILL, radius=1)
            backend.text(badge, badge_x + 3, y + 6, size=7, color=palette.text)
            badge_x += badge_width + 3

        base = y + 10 + _ascent(text_size)
        for i, line in enumerate(lines(backend, width)):
            line_y = base + i * line_step
            if isinstance(line, tuple):
                label, text = line
                backend.text(label, x + 5, line_y, size=text_size, color=palette.title)
                offset = backend.text_width(label + " ", size=text_size) + 2
                backend.text(text, x + 5 + offset, line_y, size=text_size, color=palette.text)
            else:
                backend.text(line, x + 2, line_y, size=text_size, style=text_style, color=palette.text)

    return Block(draw=draw, measure=measure, section=section, label=f"box:{title}")


def badge_row_block(
    badges: Sequence[str],
    *,
    fill: RGB,
    text_color: RGB = WHITE,
    size: float = 7,
    badge_height: float = 6.0,
    gap: float = 3.0,
    space_after: float = 3.0,
    section: Optional[str] = None,
) -> Block:
    """Row of rounded pill badges."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        badge_x = x
        for badge in badges:
            badge_width = backend.text_width(badge, size=size) + 6
            if badge_x + badge_width > x + width:
                break
            backend.rect(badge_x, y, badge_width, badge_height, fill=fill, radius=1)
            backend.text(badge, badge_x + 3, y + badge_height - 2, size=size, color=text_color)
            badge_x += badge_width + gap

    return Block(draw=draw, height=badge_height + space_after, section=section, label="badges")


def stat_boxes_block(
    stats: Sequence[tuple[str, str]],
    *,
    color: RGB,
    columns: int = 4,
    gap: float = 5.0,
    box_height: float = 25.0,
    space_after: float = 10.0,
    section: Optional[str] = None,
) -> Block:
    """Row of rounded panels, each a large value above a small label."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        box_width = (width - gap * (columns - 1)) / columns
        for i, (value, label) in enumerate(stats[:columns]):
            box_x = x + i * (box_width + gap)
            center = box_x + box_width / 2
            backend.rect(box_x, y, box_width, box_height, fill=PANEL_FILL, radius=2)
            backend.text(value, center, y + 12, size=18, style="bold", color=color, align="center")
            backend.text(label, center, y + 20, size=8, color=TEXT_COLORS["muted"], align="center")

    return Block(draw=draw, height=box_height + space_after, section=section, label="stats")


def card_row_block(
    cards: Sequence[tuple[str, str, RGB]],
    *,
    columns: int = 4,
    gap: float = 5.0,
    card_height: float = 18.0,
    row_step: float = 22.0,
    section: Optional[str] = None,
) -> Block:
    """Row of module cards: ``(title, badge, accent colour)`` each."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        card_width = (width - gap * (columns - 1)) / columns
        for i, (title, badge, accent) in enumerate(cards[:columns]):
            card_x = x + i * (card_width + gap)
            backend.rect(card_x, y, card_width, card_height, fill=PANEL_FILL, radius=2)
            backend.rect(card_x, y, 3, card_height, fill=accent)
            backend.text(title, card_x + 6, y + 7, size=9, style="bold", color=TEXT_COLORS["primary"])
            if badge:
                backend.text(badge, card_x + 6, y + 13, size=7, color=accent)

    return Block(draw=draw, height=row_step, section=section, label="cards")


def outcome_row_block(
    outcomes: Sequence[tuple[str, str]],
    *,
    color: RGB,
    columns: int = 4,
    gap: float = 3.0,
    section: Optional[str] = None,
) -> Block:
    """Row of small outcome tiles, a coloured value above its label."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        tile_width = (width - gap * (columns - 1)) / columns
        for i, (value, label) in enumerate(outcomes[:columns]):
            tile_x = x + i * (tile_width + gap)
            backend.rect(tile_x, y, tile_width, 16, fill=PANEL_FILL, radius=1)
            backend.text(value, tile_x + 2, y + 7, size=12, style="bold", color=color)
            backend.text(label, tile_x + 2, y + 12, size=7, color=TEXT_COLORS["primary"])

    return Block(draw=draw, height=20.0, section=section, label="outcomes")


def persona_row_block(
    personas: Sequence[tuple[str, str]],
    *,
    columns: int = 4,
    gap: float = 3.0,
    section: Optional[str] = None,
) -> Block:
    """Row of persona names with a quoted, shortened benefit under each."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        col_width = (width - gap * (columns - 1)) / columns
        for i, (persona, benefit) in enumerate(personas[:columns]):
            col_x = x + i * (col_width + gap)
            backend.text(persona, col_x, y + 4, size=8, style="bold", color=TEXT_COLORS["primary"])
            backend.text(
                f'"{truncate(benefit, 30)}"', col_x, y + 9,
                size=7, style="italic", color=TEXT_COLORS["secondary"],
            )

    return Block(draw=draw, height=15.0, section=section, label="personas")


def category_columns_block(
    left: tuple[str, Sequence[str]],
    right: Optional[tuple[str, Sequence[str]]] = None,
    *,
    max_items: int = 5,
    gap: float = 10.0,
    section: Optional[str] = None,
) -> Block:
    """
    Two capability categories side by side, each a title over a short list.

    Lists longer than ``max_items`` end with a "+N more..." line.
    """
    def column_height(column: Optional[tuple[str, Sequence[str]]]) -> float:
        if column is None:
            return 0.0
        items = column[1]
        extra = 1 if len(items) > max_items else 0
        return 8 + (min(len(items), max_items) + extra) * 4

    height = max(column_height(left), column_height(right)) + 5

    def draw_column(backend: RenderBackend, column: tuple[str, Sequence[str]], x: float, y: float, limit: int) -> None:
        title, items = column
        backend.text(title, x, y + _ascent(10), size=10, style="bold", color=TEXT_COLORS["primary"])
        for i, item in enumerate(items[:max_items]):
            backend.text(f"- {truncate(item, limit)}", x + 3, y + 8 + i * 4, size=8, color=TEXT_COLORS["secondary"])
        if len(items) > max_items:
            backend.text(
                f"  +{len(items) - max_items} more...", x + 3, y + 8 + max_items * 4,
                size=8, color=TEXT_COLORS["muted"],
            )

    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        col_width = (width - gap) / 2
        draw_column(backend, left, x, y, 60)
        if right is not None:
            draw_column(backend, right, x + col_width + gap, y, 55)

    return Block(draw=draw, height=height, section=section, label=f"categories:{left[0]}")


# ─────────────────────────────────────────────────────────────────────────────
# Headers and banners
# ─────────────────────────────────────────────────────────────────────────────

def module_header_block(
    title: str,
    badge: str,
    tagline: str,
    accent: RGB,
    *,
    box_height: float = 30.0,
    space_after: float = 5.0,
    section: Optional[str] = None,
) -> Block:
    """Grey panel with an accent bar, module title, optional badge and tagline."""
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        backend.rect(x - 2, y, width + 4, box_height, fill=PANEL_FILL, radius=2)
        backend.rect(x - 2, y, 4, box_height, fill=accent)
        backend.text(title, x + 5, y + 11, size=16, style="bold", color=TEXT_COLORS["primary"])
        if badge:
            badge_x = x + 5 + backend.text_width(title, size=16, style="bold") + 5
            badge_width = backend.text_width(badge, size=7) + 8
            backend.rect(badge_x, y + 5, badge_width, 8, fill=accent, radius=2)
            backend.text(badge, badge_x + 4, y + 10, size=7, color=WHITE)
        if tagline:
            backend.text(tagline, x + 5, y + 21, size=10, style="italic", color=accent)

    return Block(draw=draw, height=box_height + space_after, section=section, label=f"module:{title}")


def banner_block(
    title: str,
    fill: RGB,
    *,
    text_x: float,
    height: float = 40.0,
    title_size: float = 20,
    title_y: float = 25.0,
    kicker: str = "",
    kicker_y: float = 25.0,
    section: Optional[str] = None,
) -> Block:
    """
    Full-bleed coloured band across the page top.

    Placed with LayoutCursor.place_fixed(); ``width`` is then the page width.
    """
    def draw(backend: RenderBackend, x: float, y: float, width: float) -> None:
        backend.rect(x, y, width, height, fill=fill)
        if kicker:
            backend.text(kicker, text_x, y + kicker_y, size=14, color=WHITE)
        backend.text(title, text_x, y + title_y, size=title_size, style="bold", color=WHITE)

    return Block(draw=draw, height=height, section=section, label=f"banner:{title}")
