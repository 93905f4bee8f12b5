"""
Unit Tests for Question, ExtractedMetadata and CatalogEntry models.
"""

import pytest

from paper_importer.core.models.catalog import CatalogEntry
from paper_importer.core.models.metadata import ExtractedMetadata
from paper_importer.core.models.parts import Part, PartKind
from paper_importer.core.models.questions import Question


class TestQuestion:
    """Tests for Question dataclass."""

    @pytest.fixture
    def question(self) -> Question:
        sub = Part("1(a)(i)", PartKind.SUBPART, marks=2)
        part = Part("1(a)", PartKind.PART, marks=2, children=(sub,))
        node = Part("1", PartKind.QUESTION, marks=2, text="Stem", children=(part,))
        return Question(id="q1", question_number="1", question_node=node, topic="Forces")

    def test_init_when_root_is_not_question_then_raises_error(self):
        """question_node must be a QUESTION node."""
        with pytest.raises(ValueError, match="QUESTION"):
            Question(id="q1", question_number="1", question_node=Part("1(a)", PartKind.PART))

    def test_init_when_number_empty_then_raises_error(self):
        with pytest.raises(ValueError, match="non-empty"):
            Question(id="q1", question_number="", question_node=Part("1", PartKind.QUESTION))

    def test_all_parts_when_tree_then_flat_in_order(self, question):
        assert [p.label for p in question.all_parts] == ["1", "1(a)", "1(a)(i)"]
        assert question.get_part("1(a)").marks == 2
        assert question.marks == 2
        assert question.text == "Stem"

    def test_to_dict_when_serialized_then_has_number_and_parts(self, question):
        d = question.to_dict()
        assert d["question_number"] == "1"
        assert d["topic"] == "Forces"
        assert d["parts"][0]["label"] == "1(a)"


class TestExtractedMetadata:
    """Tests for ExtractedMetadata."""

    def test_with_changes_when_edited_then_returns_new_instance(self):
        """Reviewer edits never mutate the original."""
        meta = ExtractedMetadata(subject="Physics", exam_year=2023)
        edited = meta.with_changes(subject="Chemistry")
        assert meta.subject == "Physics"
        assert edited.subject == "Chemistry"
        assert edited.exam_year == 2023


class TestCatalogEntry:
    """Tests for CatalogEntry parsing."""

    def test_from_dict_when_canonical_shape_then_parses(self):
        entry = CatalogEntry.from_dict({
            "id": "ds-1",
            "region": {"id": "r1", "name": "International"},
            "program": {"id": "p1", "name": "IGCSE"},
            "provider": {"id": "v1", "name": "Cambridge International (CIE)"},
            "subject": {"id": "s1", "name": "Physics", "code": "0625"},
        })
        assert entry.subject.code == "0625"
        assert entry.status == "active"

    def test_from_dict_when_export_shape_then_parses(self, catalog_rows):
        entry = CatalogEntry.from_dict(catalog_rows[1])
        assert entry.id == "ds-phys"
        assert entry.provider.name == "Cambridge International (CIE)"
        assert entry.region.id == "r-int"

    def test_from_dict_when_reference_missing_then_raises_error(self, catalog_rows):
        row = dict(catalog_rows[0])
        del row["edu_subjects"]
        with pytest.raises(ValueError):
            CatalogEntry.from_dict(row)
