"""Unit tests for page geometry."""

import pytest

from capdoc_toolkit.exporter.layout import LayoutConfig, PAGE_SIZES_MM
from capdoc_toolkit.exporter.settings import LayoutSettings, Margins


class TestLayoutConfig:

    def test_when_defaults_then_a4_with_footer_reserve(self):
        # Act
        config = LayoutConfig()

        # Assert
        assert config.page_width == pytest.approx(210, abs=0.1)
        assert config.page_height == pytest.approx(297, abs=0.1)
        assert config.reserve_footer_space == 15
        assert config.body_bottom == pytest.approx(config.page_height - 25 - 15)
        assert config.content_width == pytest.approx(config.page_width - 40)

    def test_when_margins_exceed_width_then_value_error(self):
        with pytest.raises(ValueError, match="width"):
            LayoutConfig(page_width=30, margin_left=20, margin_right=20)

    def test_when_margins_exceed_height_then_value_error(self):
        with pytest.raises(ValueError, match="height"):
            LayoutConfig(page_height=50, margin_top=20, margin_bottom=20)

    def test_when_negative_reserve_then_value_error(self):
        with pytest.raises(ValueError):
            LayoutConfig(reserve_footer_space=-1)


class TestFromSettings:

    def test_when_landscape_letter_then_width_and_height_swap(self):
        # Arrange
        layout = LayoutSettings(orientation="landscape", page_size="Letter")

        # Act
        config = LayoutConfig.from_settings(layout)

        # Assert
        width, height = PAGE_SIZES_MM["Letter"]
        assert config.page_width == pytest.approx(height)
        assert config.page_height == pytest.approx(width)

    def test_when_custom_margins_then_copied(self):
        # Arrange
        layout = LayoutSettings(margins=Margins(top=10, bottom=12, left=14, right=16))

        # Act
        config = LayoutConfig.from_settings(layout, reserve_footer_space=5)

        # Assert
        assert (config.margin_top, config.margin_bottom) == (10, 12)
        assert (config.margin_left, config.margin_right) == (14, 16)
        assert config.reserve_footer_space == 5
