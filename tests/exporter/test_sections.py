"""
Unit tests for section assembly.

Checks page labels, recorded ToC levels and the ToC size estimate.
"""

from dataclasses import replace
from datetime import date

import pytest

from capdoc_toolkit.core.models import CapabilitiesContent
from capdoc_toolkit.exporter.layout import LayoutCursor
from capdoc_toolkit.exporter.sections import (
    ACT_COLORS,
    DEFAULT_ACT_COLOR,
    SectionAssembler,
    act_color,
    estimate_toc_entries,
)
from capdoc_toolkit.exporter.settings import PrintSettings

TODAY = date(2025, 3, 14)


@pytest.fixture
def layout(layout_config, backend):
    return LayoutCursor(backend, layout_config)


def make_assembler(layout, content, **section_flags) -> SectionAssembler:
    settings = PrintSettings()
    if section_flags:
        settings = replace(settings, sections=replace(settings.sections, **section_flags))
    return SectionAssembler(layout, settings, content, TODAY)


class TestEstimate:

    def test_when_all_sections_enabled_then_fixed_acts_and_modules_counted(self, sample_content):
        # 7 fixed + 2 acts + 3 modules
        assert estimate_toc_entries(PrintSettings(), sample_content) == 12

    def test_when_depth_one_then_modules_not_counted(self, sample_content):
        settings = PrintSettings.from_dict({"sections": {"tocDepth": 1}})
        assert estimate_toc_entries(settings, sample_content) == 9

    def test_when_module_details_off_then_acts_and_modules_not_counted(self, sample_content):
        settings = PrintSettings.from_dict({"sections": {"includeModuleDetails": False}})
        assert estimate_toc_entries(settings, sample_content) == 7

    def test_when_estimate_compared_to_recorded_then_never_lower(self, layout, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)

        # Act
        assembler.executive_overview()
        assembler.platform_at_glance()
        for act in sample_content.acts:
            assembler.act(act)
        assembler.cross_cutting()
        assembler.glossary()
        assembler.quick_reference()

        # Assert
        assert len(layout.registry) <= estimate_toc_entries(PrintSettings(), sample_content)


class TestActColor:

    def test_when_known_act_then_palette_color(self):
        assert act_color("act2") == ACT_COLORS["act2"]

    def test_when_unknown_act_then_default_color(self):
        assert act_color("appendix") == DEFAULT_ACT_COLOR

    def test_when_act_colors_disabled_then_primary_used(self, layout, sample_content):
        # Arrange
        settings = PrintSettings.from_dict({"branding": {"useActColors": False}})
        assembler = SectionAssembler(layout, settings, sample_content, TODAY)

        # Act / Assert
        assert assembler.accent_for(sample_content.acts[0]) == settings.branding.primary_rgb


class TestFrontMatter:

    @pytest.mark.parametrize("style", ["branded", "corporate", "minimal"])
    def test_when_cover_then_first_page_labelled_cover(self, layout, backend, sample_content, style):
        # Arrange
        settings = PrintSettings.from_dict({"document": {"coverStyle": style}})
        assembler = SectionAssembler(layout, settings, sample_content, TODAY)

        # Act
        assembler.cover()

        # Assert
        assert layout.pages[0].section == "Cover"
        assert backend.operations(0)
        assert len(layout.registry) == 0

    def test_when_document_control_then_dates_and_id_listed(self, layout, backend, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)

        # Act
        assembler.document_control()

        # Assert
        texts = backend.texts(0)
        assert "IHRM-PC-001" in texts
        assert "2025-03-14" in texts
        assert layout.pages[0].section == "Document Control"

    def test_when_legal_notice_then_all_notice_titles_drawn(self, layout, backend, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)

        # Act
        assembler.legal_notice()

        # Assert
        drawn = [text for index in range(layout.page_count) for text in backend.texts(index)]
        for title in ("COPYRIGHT NOTICE", "TRADEMARKS", "CONFIDENTIALITY", "DISCLAIMER", "FORWARD-LOOKING STATEMENTS"):
            assert title in drawn


class TestBody:

    def test_when_act_assembled_then_divider_level_one_and_modules_level_two(self, layout, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)
        act = sample_content.acts[0]

        # Act
        assembler.act(act)

        # Assert
        levels = [(entry.title, entry.level) for entry in layout.registry.entries]
        assert levels == [(act.title, 1), ("Recruitment", 2), ("Onboarding", 2)]
        assert layout.pages[0].section == act.title

    def test_when_modules_start_new_page_then_each_module_own_page(self, layout, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content, include_act_dividers=False)

        # Act
        assembler.act(sample_content.acts[0])

        # Assert
        pages = [entry.page_index for entry in layout.registry.entries]
        assert pages[0] < pages[1]

    def test_when_modules_share_pages_then_short_modules_stay_together(self, layout, sample_content):
        # Arrange
        assembler = make_assembler(
            layout, sample_content, include_act_dividers=False, module_starts_new_page=False,
        )

        # Act
        assembler.act(sample_content.acts[1])
        assembler.act(sample_content.acts[1])

        # Assert
        entries = layout.registry.entries
        assert entries[0].page_index == entries[1].page_index == 0

    def test_when_module_has_regional_note_then_note_box_drawn(self, layout, backend, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content, include_act_dividers=False)

        # Act
        assembler.act(sample_content.acts[1])

        # Assert
        assert "Regional Compliance: CPD tracking" in backend.texts(0)

    def test_when_module_has_many_category_items_then_more_line_drawn(self, layout, backend, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content, include_act_dividers=False)

        # Act
        assembler.module(sample_content.acts[0].modules[0], sample_content.acts[0])

        # Assert
        drawn = [text for index in range(layout.page_count) for text in backend.texts(index)]
        assert "  +3 more..." in drawn

    def test_when_cross_cutting_then_three_level_one_sections(self, layout, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)

        # Act
        assembler.cross_cutting()

        # Assert
        titles = [entry.title for entry in layout.registry.entries]
        assert titles == ["Platform Features", "Regional Compliance", "AI Intelligence"]
        assert layout.page_count == 3

    def test_when_regions_listed_then_countries_drawn_as_badges(self, layout, backend, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)

        # Act
        assembler.cross_cutting()

        # Assert
        texts = backend.texts(1)
        assert "Jamaica" in texts
        assert "Trinidad" in texts


class TestBackMatter:

    def test_when_glossary_then_toc_title_differs_from_page_label(self, layout, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)

        # Act
        assembler.glossary()

        # Assert
        assert layout.registry.entries[0].title == "Glossary of Terms"
        assert layout.pages[0].section == "Glossary"

    def test_when_quick_reference_then_contact_line_above_footer_reserve(self, layout, layout_config, backend, sample_content):
        # Arrange
        assembler = make_assembler(layout, sample_content)

        # Act
        assembler.quick_reference()

        # Assert
        contact = next(op for op in backend.operations(0) if op.text == sample_content.contact_line)
        assert contact.y <= layout_config.body_bottom
        assert layout.page_count == 1
        assert layout.registry.entries[0].title == "Quick Reference Card"

    def test_when_content_empty_then_glossary_uses_default_terms(self, layout, backend):
        # Arrange
        assembler = make_assembler(layout, CapabilitiesContent())

        # Act
        assembler.glossary()

        # Assert
        assert "ESS" in backend.texts(0)
