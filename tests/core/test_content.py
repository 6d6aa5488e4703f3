"""
Unit tests for the business content model.
"""

import json

from capdoc_toolkit.core.models import CapabilitiesContent, load_content
from capdoc_toolkit.core.models.content import DEFAULT_CONTACT_LINE, DEFAULT_GLOSSARY, Act


class TestCapabilitiesContent:

    def test_when_camel_case_dict_then_nested_fields_parsed(self, sample_content):
        # Assert
        module = sample_content.acts[0].modules[0]
        assert module.key_outcomes[0].value == "40%"
        assert module.regional_advantage.regions == ("Caribbean",)
        assert module.ai_capabilities[0].type == "Screening"
        assert sample_content.acts[1].modules[0].regional_note == "CPD tracking"

    def test_when_counting_modules_then_all_acts_included(self, sample_content):
        assert sample_content.module_count == 3
        assert [m.title for m in sample_content.all_modules] == ["Recruitment", "Onboarding", "Learning"]

    def test_when_glossary_missing_then_default_glossary(self, sample_content):
        assert sample_content.glossary == DEFAULT_GLOSSARY
        assert sample_content.contact_line == DEFAULT_CONTACT_LINE

    def test_when_not_a_dict_then_empty_content(self):
        content = CapabilitiesContent.from_dict(["not", "a", "dict"])
        assert content.acts == ()
        assert content.module_count == 0

    def test_when_list_items_not_dicts_then_skipped(self):
        content = CapabilitiesContent.from_dict({"acts": ["bogus", {"id": "act1", "title": "Act 1: Hire"}]})
        assert len(content.acts) == 1

    def test_when_module_has_no_regional_advantage_then_none(self, sample_content):
        assert sample_content.acts[0].modules[1].regional_advantage is None


class TestAct:

    def test_when_numbered_act_then_label_and_short_title(self):
        act = Act(id="act3", title="Act 3: Pay & Reward")
        assert act.label == "ACT 3"
        assert act.short_title == "Pay & Reward"

    def test_when_prologue_then_upper_label_and_full_title(self):
        act = Act(id="prologue", title="Foundations")
        assert act.label == "PROLOGUE"
        assert act.short_title == "Foundations"


class TestLoadContent:

    def test_when_file_valid_then_content_loaded(self, tmp_path, content_dict):
        # Arrange
        path = tmp_path / "content.json"
        path.write_text(json.dumps(content_dict), encoding="utf-8")

        # Act
        content = load_content(path)

        # Assert
        assert content.module_count == 3

    def test_when_file_missing_then_empty_content(self, tmp_path):
        content = load_content(tmp_path / "missing.json")
        assert content.acts == ()
        assert content.glossary == DEFAULT_GLOSSARY
