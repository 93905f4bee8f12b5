"""
Unit Tests for Serialization

Tests for normalizing uploaded paper JSON into question trees.
"""

import json

import pytest

from paper_importer.compliance.answer_structure import validate_answer_structure
from paper_importer.core.models.parts import PartKind
from paper_importer.core.schemas.validator import ValidationError
from paper_importer.core.utils.serialization import (
    deserialize_paper,
    deserialize_question,
    load_paper,
    serialize_question,
)
from paper_importer.errors import ImporterError, PaperLoadError


class TestDeserializeQuestion:
    """Tests for deserialize_question function."""

    def test_deserialize_when_parts_and_subparts_then_builds_labels(self, sample_paper_payload):
        """Part and subpart labels are built from the question number."""
        q = deserialize_question(sample_paper_payload["questions"][1], index=1)

        assert [p.label for p in q.all_parts] == ["2", "2(a)", "2(b)", "2(b)(i)", "2(b)(ii)"]
        assert q.get_part("2(b)(ii)").kind == PartKind.SUBPART
        assert q.id == "q2"

    def test_deserialize_when_legacy_correct_answer_then_single_alternative(self, sample_paper_payload):
        """A legacy correct_answer becomes one alternative worth full marks."""
        q = deserialize_question(sample_paper_payload["questions"][1], index=1)
        part = q.get_part("2(a)")

        assert len(part.correct_answers) == 1
        alt = part.correct_answers[0]
        assert alt.answer == "0.5 A"
        assert alt.marks == 2
        assert alt.alternative_id == 1

    def test_deserialize_when_attachment_is_string_then_wrapped_in_tuple(self, sample_paper_payload):
        q = deserialize_question(sample_paper_payload["questions"][1], index=1)
        assert q.get_part("2(b)(ii)").attachments == ("fig2.png",)
        assert q.get_part("2(b)(i)").attachments == ()

    def test_deserialize_when_text_aliases_then_normalized(self):
        """question_text / text / question_type / total_marks aliases are read."""
        q = deserialize_question({
            "question_number": 7,
            "question_text": "Describe the graph.",
            "question_type": "mcq",
            "total_marks": "3",
            "topics": ["Waves"],
        })
        assert q.question_number == "7"
        assert q.text == "Describe the graph."
        assert q.question_node.question_type == "mcq"
        assert q.marks == 3
        assert q.topic == "Waves"

    def test_deserialize_when_number_missing_then_uses_position(self):
        q = deserialize_question({"marks": 1}, index=4)
        assert q.question_number == "5"

    def test_deserialize_when_non_integer_answer_ids_then_reported_by_answer_checks(self):
        """An id "A" is not renumbered, so a link to 1 stays dangling."""
        q = deserialize_question({
            "question_number": 3,
            "marks": 2,
            "correct_answers": [
                {"answer": "x", "marks": 1, "alternative_id": "A"},
                {"answer": "y", "marks": 1, "alternative_id": 2, "linked_alternatives": [1]},
            ],
        })
        node = q.question_node

        assert node.alternative_ids == ("A", 2)
        assert validate_answer_structure(node.marks, node.correct_answers) == [
            "Alternative 2 links to non-existent ID: 1",
        ]

    def test_serialize_when_roundtrip_fields_then_keeps_answers(self, sample_paper_payload):
        q = deserialize_question(sample_paper_payload["questions"][0])
        d = serialize_question(q)
        assert d["correct_answers"][0]["linked_alternatives"] == [2]
        assert d["unit"] == "Kinematics"


class TestLoadPaper:
    """Tests for paper loading."""

    def test_deserialize_paper_when_valid_then_splits_metadata(self, sample_paper_payload):
        paper = deserialize_paper(sample_paper_payload)
        assert len(paper.questions) == 2
        assert "questions" not in paper.metadata
        assert paper.metadata["paper_code"] == "0625/42"

    def test_load_when_file_exists_then_sets_source(self, paper_file):
        paper = load_paper(paper_file)
        assert paper.source == paper_file
        assert paper.questions[0].question_number == "1"

    def test_load_when_missing_file_then_raises_paper_load_error(self, tmp_path):
        with pytest.raises(PaperLoadError, match="not found"):
            load_paper(tmp_path / "missing.json")

    def test_load_when_invalid_json_then_raises_paper_load_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PaperLoadError) as exc_info:
            load_paper(path)
        assert isinstance(exc_info.value, ImporterError)
        assert exc_info.value.__cause__ is not None

    def test_load_when_schema_invalid_then_raises_validation_error(self, tmp_path):
        path = tmp_path / "paper.json"
        path.write_text(json.dumps({"questions": {"1": {}}}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_paper(path)
