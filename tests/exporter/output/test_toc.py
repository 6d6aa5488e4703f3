"""
Unit tests for the deferred table of contents.

Reserve before content, resolve after, never add pages at resolve time.
"""

import logging

import pytest

from capdoc_toolkit.exporter.layout import LayoutCursor, TocEntry
from capdoc_toolkit.exporter.layout.blocks import heading_block
from capdoc_toolkit.exporter.output.toc import DeferredResolutionPass, truncate_title


@pytest.fixture
def layout(layout_config, backend):
    return LayoutCursor(backend, layout_config)


class TestReserve:

    def test_when_reserving_then_blank_labelled_pages_created(self, layout, layout_config, backend):
        # Arrange
        layout.new_page("Cover")
        toc = DeferredResolutionPass(layout_config)

        # Act
        reserved = toc.reserve(layout, entry_estimate=10)

        # Assert
        assert reserved == [1]
        assert layout.pages[1].section == "Table of Contents"
        assert backend.operations(1) == ()

    def test_when_estimate_exceeds_one_page_then_extra_pages_reserved(self, layout, layout_config):
        # Arrange
        toc = DeferredResolutionPass(layout_config)
        estimate = toc.entries_per_page * 2 + 1

        # Act
        reserved = toc.reserve(layout, estimate)

        # Assert
        assert reserved == [0, 1, 2]

    def test_when_estimate_zero_then_one_page_reserved(self, layout, layout_config):
        toc = DeferredResolutionPass(layout_config)
        assert len(toc.reserve(layout, 0)) == 1

    def test_when_content_follows_reservation_then_no_block_lands_on_reserved_pages(self, layout, layout_config):
        # Arrange
        toc = DeferredResolutionPass(layout_config)
        reserved = toc.reserve(layout, toc.entries_per_page + 1)

        # Act
        layout.ensure_space(100, "Recruitment")
        layout.push_heading(heading_block("Recruitment", section="Recruitment"), "Recruitment", 2)
        layout.push(heading_block("Onboarding"))

        # Assert
        assert all(p.page_index not in reserved for p in layout.placements)
        assert all(e.page_index not in reserved for e in layout.registry.entries)
        assert layout.pages[-1].section == "Recruitment"

    def test_when_reserved_then_last_reserved_page_has_no_room_left(self, layout, layout_config):
        toc = DeferredResolutionPass(layout_config)
        toc.reserve(layout, 1)
        assert layout.remaining_height == 0

    def test_when_reserving_twice_then_runtime_error(self, layout, layout_config):
        toc = DeferredResolutionPass(layout_config)
        toc.reserve(layout, 3)
        with pytest.raises(RuntimeError):
            toc.reserve(layout, 3)


class TestResolve:

    def test_when_sections_on_pages_3_and_5_then_rows_show_3_and_5(self, layout, layout_config, backend):
        # Arrange
        layout.new_page("Cover")
        toc = DeferredResolutionPass(layout_config)
        toc.reserve(layout, 2)
        layout.new_page("Alpha")
        layout.push_heading(heading_block("Alpha"), "Alpha", 1)
        layout.new_page("Between")
        layout.new_page("Beta")
        layout.push_heading(heading_block("Beta"), "Beta", 1)
        pages_before = backend.page_count

        # Act
        drawn = toc.resolve(backend, layout.registry.entries)

        # Assert
        assert drawn == 2
        assert backend.page_count == pages_before
        assert backend.texts(1) == ["Table of Contents", "Alpha", "3", "Beta", "5"]

    def test_when_page_number_drawn_then_right_aligned_at_right_margin(self, layout, layout_config, backend):
        # Arrange
        toc = DeferredResolutionPass(layout_config)
        toc.reserve(layout, 1)
        layout.new_page("Body")
        layout.record_section("Body", 1)

        # Act
        toc.resolve(backend, layout.registry.entries)

        # Assert
        number = [op for op in backend.operations(0) if op.text == "2"][0]
        assert number.x == pytest.approx(layout_config.page_width - layout_config.margin_right)
        assert number.options["align"] == "right"

    def test_when_level_two_then_indented_and_not_bold(self, layout, layout_config, backend):
        # Arrange
        toc = DeferredResolutionPass(layout_config)
        toc.reserve(layout, 2)
        entries = [TocEntry("Act 1", 1, 0), TocEntry("Payroll", 2, 0)]

        # Act
        toc.resolve(backend, entries)

        # Assert
        ops = {op.text: op for op in backend.operations(0)}
        assert ops["Payroll"].x == pytest.approx(ops["Act 1"].x + 8)
        assert ops["Act 1"].options["style"] == "bold"
        assert ops["Payroll"].options["style"] == "normal"

    def test_when_max_level_set_then_deeper_entries_skipped(self, layout, layout_config, backend):
        # Arrange
        toc = DeferredResolutionPass(layout_config, max_level=1)
        toc.reserve(layout, 2)
        entries = [TocEntry("Act 1", 1, 0), TocEntry("Payroll", 2, 0)]

        # Act
        drawn = toc.resolve(backend, entries)

        # Assert
        assert drawn == 1
        assert "Payroll" not in backend.texts(0)

    def test_when_more_entries_than_capacity_then_dropped_with_warning(self, layout, layout_config, backend, caplog):
        # Arrange
        toc = DeferredResolutionPass(layout_config)
        toc.reserve(layout, 1)
        entries = [TocEntry(f"Entry {i}", 1, 0) for i in range(toc.capacity + 5)]

        # Act
        with caplog.at_level(logging.WARNING):
            drawn = toc.resolve(backend, entries)

        # Assert
        assert drawn == toc.capacity
        assert backend.page_count == 1
        assert "overflow" in caplog.text
        assert toc.warnings

    def test_when_rows_drawn_then_all_above_footer_reserve(self, layout, layout_config, backend):
        # Arrange
        toc = DeferredResolutionPass(layout_config)
        toc.reserve(layout, 1)
        entries = [TocEntry(f"Entry {i}", 1, 0) for i in range(toc.capacity)]

        # Act
        toc.resolve(backend, entries)

        # Assert
        assert max(op.y for op in backend.operations(0)) <= layout_config.body_bottom

    def test_when_nothing_reserved_then_nothing_drawn(self, layout_config, backend):
        toc = DeferredResolutionPass(layout_config)
        assert toc.resolve(backend, [TocEntry("A", 1, 0)]) == 0


class TestTruncateTitle:

    def test_when_title_longer_than_50_then_47_chars_and_ellipsis(self):
        # Act
        result = truncate_title("A" * 60)

        # Assert
        assert result == "A" * 47 + "..."

    def test_when_title_exactly_50_then_unchanged(self):
        assert truncate_title("B" * 50) == "B" * 50
