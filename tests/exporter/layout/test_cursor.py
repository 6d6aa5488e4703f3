"""
Unit tests for LayoutCursor.

Block placement, section recording and the ToC page capture.
"""

import pytest

from capdoc_toolkit.exporter.layout import Block, LayoutConfig, LayoutCursor, TocEntry
from capdoc_toolkit.exporter.layout.blocks import heading_block, paragraph_block, spacer_block, text_block
from capdoc_toolkit.exporter.output.backend import ReportLabBackend


@pytest.fixture
def layout(layout_config, backend):
    return LayoutCursor(backend, layout_config)


class TestBlockModel:

    def test_when_neither_height_nor_measure_then_value_error(self):
        with pytest.raises(ValueError):
            Block(draw=lambda b, x, y, w: None)

    def test_when_both_height_and_measure_then_value_error(self):
        with pytest.raises(ValueError):
            Block(draw=lambda b, x, y, w: None, height=5, measure=lambda b, w: 5)

    def test_when_toc_level_zero_then_value_error(self):
        with pytest.raises(ValueError):
            TocEntry(title="X", level=0, page_index=0)

    def test_when_toc_entry_then_page_number_is_one_based(self):
        assert TocEntry(title="X", level=1, page_index=3).page_number == 4


class TestPush:

    def test_when_push_then_drawn_at_margin_and_cursor_advances(self, layout, layout_config, backend):
        # Arrange
        calls = []
        block = Block(draw=lambda b, x, y, w: calls.append((b.current_page, x, y, w)), height=12)

        # Act
        layout.push(block)
        layout.push(block)

        # Assert
        top = layout_config.margin_top
        assert calls == [
            (0, layout_config.margin_left, top, layout_config.content_width),
            (0, layout_config.margin_left, top + 12, layout_config.content_width),
        ]
        assert layout.y == top + 24

    def test_when_measured_block_then_height_follows_wrapped_lines(self, layout, backend):
        # Arrange
        text = "word " * 200
        block = paragraph_block(text, size=9)
        expected_lines = len(backend.wrap_text(text, layout.config.content_width, size=9))

        # Act
        layout.push(block)

        # Assert
        assert expected_lines > 1
        assert layout.placements[0].height == pytest.approx(expected_lines * backend.line_height(9))
        assert len(backend.texts(0)) == expected_lines

    def test_when_later_page_is_drawn_then_earlier_page_is_untouched(self, layout, backend):
        # Arrange
        layout.push(text_block("first"))
        layout.new_page("Second")

        # Act
        layout.push(text_block("second"))

        # Assert
        assert backend.texts(0) == ["first"]
        assert backend.texts(1) == ["second"]

    def test_when_advance_negative_then_value_error(self, layout):
        layout.new_page()
        with pytest.raises(ValueError):
            layout.advance(-1)

    def test_when_move_to_above_margin_then_clamped(self, layout, layout_config):
        # Arrange
        layout.new_page()

        # Act
        layout.move_to(3)

        # Assert
        assert layout.y == layout_config.margin_top


class TestPlaceFixed:

    def test_when_place_fixed_then_drawn_at_page_origin_without_moving_cursor(self, layout, layout_config):
        # Arrange
        layout.new_page("Banner")
        calls = []
        before = layout.y

        # Act
        layout.place_fixed(Block(draw=lambda b, x, y, w: calls.append((x, y, w)), height=0))

        # Assert
        assert calls == [(0.0, 0.0, layout_config.page_width)]
        assert layout.y == before


class TestPushHeading:

    def test_when_heading_breaks_page_then_entry_records_new_page(self, layout):
        # Arrange
        layout.new_page("Intro")
        layout.advance(layout.remaining_height - 5)

        # Act
        entry = layout.push_heading(heading_block("Payroll", section="Payroll"), "Payroll", 2)

        # Assert
        assert entry.page_index == 1
        assert layout.pages[1].section == "Payroll"
        assert layout.registry.entries == (entry,)

    def test_when_sections_on_pages_3_and_5_then_entries_show_printed_numbers(self, layout):
        # Arrange
        for _ in range(2):
            layout.new_page("Front")
        layout.new_page("Alpha")
        layout.push_heading(heading_block("Alpha"), "Alpha", 1)
        layout.new_page("Between")
        layout.new_page("Beta")
        layout.push_heading(heading_block("Beta"), "Beta", 1)

        # Act
        numbers = [(e.title, e.page_number) for e in layout.registry.entries]

        # Assert
        assert numbers == [("Alpha", 3), ("Beta", 5)]


class TestRecordedPagesMatchDrawnPages:

    def test_when_mixed_content_then_every_entry_page_holds_its_heading(self, layout, backend):
        # Arrange
        for i in range(12):
            title = f"Section {i}"
            layout.push_heading(heading_block(title, section=title), title, 1 + i % 2)
            layout.push_all(spacer_block(30 + (i * 17) % 70) for _ in range(3))

        # Act
        entries = layout.registry.entries

        # Assert
        assert len(entries) == 12
        for entry in entries:
            assert entry.title in backend.texts(entry.page_index)
