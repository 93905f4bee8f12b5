"""
Unit Tests for Mapping Tables and Locked JSON Writes
"""

import json

import pytest

from paper_importer.common.file_locking import locked_write_json
from paper_importer.common.mappings import (
    MappingTables,
    default_mapping_tables,
    load_mapping_tables,
)
from paper_importer.errors import ConfigLoadError


class TestDefaultMappingTables:
    """Tests for the shipped tables."""

    def test_defaults_when_loaded_then_tables_populated(self):
        tables = default_mapping_tables()
        assert tables.providers["cambridge assessment"] == "Cambridge International (CIE)"
        assert tables.programs["igcse"] == "IGCSE"
        assert tables.sessions["may/june"] == "M/J"
        assert "diagram" in tables.figure_keywords
        assert tables.subject_codes["0625"] == "Physics"

    def test_defaults_when_loaded_twice_then_cached(self):
        assert default_mapping_tables() is default_mapping_tables()

    def test_paper_types_when_loaded_then_keep_file_order(self):
        tables = default_mapping_tables()
        assert list(tables.paper_types)[:2] == ["Multiple Choice", "Theory"]


class TestMappingTablesFromDict:
    """Tests for MappingTables.from_dict."""

    def test_from_dict_when_partial_then_other_tables_kept(self):
        tables = MappingTables.from_dict({"providers": {"CAIE": "Cambridge International (CIE)"}})
        assert tables.providers == {"caie": "Cambridge International (CIE)"}
        assert tables.programs == default_mapping_tables().programs

    def test_from_dict_when_table_wrong_type_then_raises_error(self):
        with pytest.raises(ValueError, match="must be an object"):
            MappingTables.from_dict({"sessions": ["may/june"]})

    def test_from_dict_when_unknown_table_then_warns(self, caplog):
        with caplog.at_level("WARNING"):
            MappingTables.from_dict({"colours": {}})
        assert "unknown mapping tables" in caplog.text

    def test_to_dict_when_serialized_then_json_friendly(self):
        d = default_mapping_tables().to_dict()
        json.dumps(d)
        assert isinstance(d["figure_keywords"], list)


class TestLoadMappingTables:
    """Tests for load_mapping_tables."""

    def test_load_when_valid_file_then_overrides(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"figure_keywords": ["Sketch"]}), encoding="utf-8")
        tables = load_mapping_tables(path)
        assert tables.figure_keywords == ("sketch",)

    def test_load_when_missing_file_then_raises_config_error(self, tmp_path):
        with pytest.raises(ConfigLoadError):
            load_mapping_tables(tmp_path / "none.json")

    def test_load_when_not_object_then_raises_config_error(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="JSON object"):
            load_mapping_tables(path)


class TestLockedWriteJson:
    """Tests for locked_write_json."""

    def test_write_when_new_path_then_creates_parents(self, tmp_path):
        path = tmp_path / "out" / "report.json"
        locked_write_json(path, {"a": 1})
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1}

    def test_write_when_existing_longer_file_then_truncates(self, tmp_path):
        path = tmp_path / "report.json"
        path.write_text(json.dumps({"long": "x" * 200}), encoding="utf-8")
        locked_write_json(path, {"b": 2})
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": 2}
