"""
Unit tests for key normalization and forgiving JSON loading.
"""

import logging

import pytest

from capdoc_toolkit.core.utils.serialization import load_json_payload, normalize_keys, to_snake


class TestToSnake:

    @pytest.mark.parametrize("key,expected", [
        ("pageNumberFormat", "page_number_format"),
        ("includeCover", "include_cover"),
        ("already_snake", "already_snake"),
        ("date-based", "date_based"),
        ("tocDepth2", "toc_depth2"),
    ])
    def test_when_key_converted_then_snake_case(self, key, expected):
        assert to_snake(key) == expected


class TestNormalizeKeys:

    def test_when_dict_then_top_level_keys_converted(self):
        # Act
        result = normalize_keys({"headerStyle": "simple", "nested": {"innerKey": 1}})

        # Assert
        assert result == {"header_style": "simple", "nested": {"innerKey": 1}}

    def test_when_not_a_dict_then_empty(self):
        assert normalize_keys(None) == {}
        assert normalize_keys([1, 2]) == {}


class TestLoadJsonPayload:

    def test_when_missing_then_empty_and_warning(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_json_payload(tmp_path / "none.json") == {}
        assert "not found" in caplog.text

    def test_when_corrupted_then_empty_and_warning(self, tmp_path, caplog):
        # Arrange
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        # Act
        with caplog.at_level(logging.WARNING):
            result = load_json_payload(path)

        # Assert
        assert result == {}
        assert "corrupted" in caplog.text

    def test_when_json_array_then_empty(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_json_payload(path) == {}

    def test_when_object_then_returned(self, tmp_path):
        path = tmp_path / "ok.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert load_json_payload(path) == {"a": 1}
