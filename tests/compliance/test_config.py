"""
Unit Tests for Extraction Rules Config

Tests for ExtractionRulesConfig parsing and loading.
"""

import json

import pytest

from paper_importer.compliance.config import (
    RULES_CONFIG_SCHEMA_VERSION,
    ExtractionRulesConfig,
    load_rules_config,
)
from paper_importer.errors import ConfigLoadError


class TestExtractionRulesConfig:
    """Tests for ExtractionRulesConfig."""

    def test_defaults_when_created_then_screen_defaults(self):
        config = ExtractionRulesConfig()
        assert config.forward_slash_handling is True
        assert config.figure_detection is True
        assert config.educational_content.hints_required is True
        assert config.subject_specific.physics is False
        assert config.abbreviations.ecf is False
        assert config.answer_structure.require_context is True
        assert config.answer_structure.accept_alternatives is False

    def test_from_dict_when_camel_case_then_parsed(self):
        config = ExtractionRulesConfig.from_dict({
            "contextRequired": False,
            "subjectSpecific": {"chemistry": True},
            "answerStructure": {"requireContext": False},
        })
        assert config.context_required is False
        assert config.subject_specific.chemistry is True
        assert config.answer_structure.require_context is False

    def test_from_dict_when_unknown_keys_then_ignored(self):
        """Keys the importer does not use (examBoard, levelDescriptors...) are skipped."""
        config = ExtractionRulesConfig.from_dict({
            "examBoard": "Edexcel",
            "subjectSpecific": {"biology": True},
            "markScheme": {"levelDescriptors": False},
        })
        assert config == ExtractionRulesConfig()
        assert "examBoard" not in config.to_dict()

    def test_from_dict_when_snake_case_then_parsed(self):
        config = ExtractionRulesConfig.from_dict({"educational_content": {"explanations_required": False}})
        assert config.educational_content.explanations_required is False
        assert config.educational_content.hints_required is True

    def test_from_dict_when_malformed_value_then_default_with_warning(self, caplog):
        with caplog.at_level("WARNING"):
            config = ExtractionRulesConfig.from_dict({
                "figureDetection": "yes",
                "markScheme": "all",
            })
        assert config.figure_detection is True
        assert config.mark_scheme.marking_criteria is True
        assert "figure_detection must be true/false" in caplog.text
        assert "malformed rules config section mark_scheme" in caplog.text

    def test_from_dict_when_older_version_then_warns(self, caplog):
        with caplog.at_level("WARNING"):
            config = ExtractionRulesConfig.from_dict({"configSchemaVersion": 0})
        assert config.config_schema_version == 0
        assert "outdated layout" in caplog.text

    def test_to_dict_when_roundtrip_then_equal(self):
        config = ExtractionRulesConfig.from_dict({"abbreviations": {"ora": True}})
        d = config.to_dict()
        assert d["abbreviations"]["ora"] is True
        assert d["configSchemaVersion"] == RULES_CONFIG_SCHEMA_VERSION
        assert ExtractionRulesConfig.from_dict(d) == config


class TestLoadRulesConfig:
    """Tests for load_rules_config."""

    def test_load_when_none_then_defaults(self):
        assert load_rules_config(None) == ExtractionRulesConfig()

    def test_load_when_file_then_parsed(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"educationalContent": {"hintsRequired": False}}), encoding="utf-8")
        assert load_rules_config(path).educational_content.hints_required is False

    def test_load_when_invalid_json_then_raises_config_error(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            load_rules_config(path)

    def test_load_when_array_then_raises_config_error(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="JSON object"):
            load_rules_config(path)
