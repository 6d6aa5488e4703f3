"""Unit tests for block constructors."""

import pytest

from capdoc_toolkit.exporter.layout import LayoutCursor
from capdoc_toolkit.exporter.layout.blocks import (
    AI_PALETTE,
    badge_row_block,
    bullet_list_blocks,
    category_columns_block,
    heading_block,
    labeled_box_block,
    paragraph_blocks,
    table_row_block,
    text_block,
    truncate,
)


@pytest.fixture
def layout(layout_config, backend):
    cursor = LayoutCursor(backend, layout_config)
    cursor.new_page("Blocks")
    return cursor


class TestTruncate:

    def test_when_short_then_unchanged(self):
        assert truncate("Payroll", 50) == "Payroll"

    def test_when_long_then_cut_with_ellipsis(self):
        # Act
        result = truncate("x" * 60, 50)

        # Assert
        assert len(result) == 50
        assert result.endswith("...")


class TestTextBlocks:

    def test_when_center_aligned_then_anchor_is_content_center(self, layout, layout_config, backend):
        # Act
        layout.push(text_block("Centered", align="center"))

        # Assert
        op = backend.operations(0)[0]
        assert op.x == pytest.approx(layout_config.margin_left + layout_config.content_width / 2)
        assert op.options["align"] == "center"

    def test_when_heading_then_height_is_space_after(self, layout):
        # Act
        layout.push(heading_block("Title", space_after=12))

        # Assert
        assert layout.placements[0].height == 12

    def test_when_long_paragraph_split_then_one_block_per_line(self, backend, layout_config):
        # Arrange
        text = "capability " * 120

        # Act
        blocks = paragraph_blocks(backend, text, layout_config.content_width, space_after=4)

        # Assert
        lines = backend.wrap_text(text, layout_config.content_width, size=9)
        assert len(blocks) == len(lines) + 1
        assert blocks[-1].label == "spacer"

    def test_when_bullets_with_limit_then_items_truncated(self, layout, backend):
        # Act
        layout.push_all(bullet_list_blocks(["short", "y" * 90], limit=20))

        # Assert
        texts = backend.texts(0)
        assert texts[0] == "- short"
        assert len(texts[1]) == len("- ") + 20


class TestRows:

    def test_when_cells_and_columns_differ_then_value_error(self):
        with pytest.raises(ValueError):
            table_row_block(("a", "b"), (0.0,))

    def test_when_category_has_more_than_five_items_then_more_line_added(self, layout, backend):
        # Arrange
        block = category_columns_block(("Left", [f"Item {i}" for i in range(8)]), ("Right", ["One"]))

        # Act
        layout.push(block)

        # Assert
        texts = backend.texts(0)
        assert "  +3 more..." in texts
        assert "- Item 5" not in texts
        assert layout.placements[0].height == 8 + 6 * 4 + 5


class TestLabeledBox:

    def test_when_pairs_then_label_drawn_in_title_colour(self, layout, backend):
        # Act
        layout.push(labeled_box_block("AI-Powered Intelligence", [("Screening:", "Ranks applicants")], AI_PALETTE))

        # Assert
        ops = [op for op in backend.operations(0) if op.kind == "text"]
        label = next(op for op in ops if op.text == "Screening:")
        assert label.options["color"] == AI_PALETTE.title

    def test_when_max_lines_then_wrapped_item_capped(self, layout, backend):
        # Arrange
        long_item = "The hiring process takes far too long for everyone involved. " * 6

        # Act
        layout.push(labeled_box_block("THE CHALLENGE", [long_item], AI_PALETTE, max_lines=2, line_step=4))

        # Assert
        texts = backend.texts(0)
        assert texts[0] == "THE CHALLENGE"
        assert len(texts) == 3
        assert layout.placements[0].height == 10 + 2 * 4 + 2 + 5


class TestBadgeRow:

    def test_when_badges_fit_then_one_pill_per_badge(self, layout, backend):
        # Act
        layout.push(badge_row_block(["Jamaica", "Trinidad"], fill=(59, 130, 246)))

        # Assert
        assert backend.texts(0) == ["Jamaica", "Trinidad"]
        assert len([op for op in backend.operations(0) if op.kind == "rect"]) == 2
        assert layout.placements[0].height == 6 + 3

    def test_when_row_too_wide_then_remaining_badges_skipped(self, layout, backend):
        # Act
        layout.push(badge_row_block([f"Country number {i}" for i in range(40)], fill=(59, 130, 246)))

        # Assert
        assert 0 < len(backend.texts(0)) < 40
