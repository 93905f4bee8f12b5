"""
Unit Tests for Answer Structure Validation

Tests for validate_answer_structure, apply_answer_structure and the
editing helpers.
"""

import pytest

from paper_importer.compliance.answer_structure import (
    AnswerStructureError,
    add_alternative,
    apply_answer_structure,
    detect_answer_context,
    link_alternatives,
    next_alternative_id,
    remove_alternative,
    unlink_alternatives,
    validate_answer_structure,
)
from paper_importer.core.models.answers import Alternative, AnswerContext
from paper_importer.core.models.parts import Part, PartKind

_CTX = AnswerContext(type="value", value="speed")


class TestValidateAnswerStructure:
    """Tests for validate_answer_structure function."""

    def test_validate_when_three_plus_two_for_five_then_no_errors(self):
        """Linked 3 + 2 mark alternatives with context save on a 5 mark node."""
        alts = [
            Alternative("a", 3, 1, (2,), context=_CTX),
            Alternative("b", 2, 2, (1,), context=_CTX),
        ]
        assert validate_answer_structure(5, alts, context_required=True) == []

    def test_validate_when_marks_do_not_sum_then_error(self):
        alts = [Alternative("a", 3, 1), Alternative("b", 3, 2)]
        assert validate_answer_structure(5, alts) == ["Total marks (6) don't match question marks (5)"]

    def test_validate_when_empty_list_and_nonzero_marks_then_error(self):
        assert validate_answer_structure(2, []) == ["Total marks (0) don't match question marks (2)"]

    def test_validate_when_duplicate_ids_then_error(self):
        alts = [Alternative("a", 1, 1), Alternative("b", 1, 1)]
        assert validate_answer_structure(2, alts) == ["Duplicate alternative ID: 1"]

    def test_validate_when_dangling_link_then_error(self):
        alts = [Alternative("a", 1, 1, (4,)), Alternative("b", 1, 2), Alternative("c", 1, 3)]
        assert validate_answer_structure(3, alts) == ["Alternative 1 links to non-existent ID: 4"]

    def test_validate_when_context_missing_and_required_then_error(self):
        alts = [Alternative("a", 1, 1, context=_CTX), Alternative("b", 1, 2)]
        assert validate_answer_structure(2, alts) == []
        assert validate_answer_structure(2, alts, context_required=True) == [
            "Alternative 2 missing context information",
        ]

    def test_validate_when_several_problems_then_all_reported_in_order(self):
        alts = [Alternative("a", 2, 1, (9,)), Alternative("b", 2, 1)]
        assert validate_answer_structure(3, alts, context_required=True) == [
            "Total marks (4) don't match question marks (3)",
            "Duplicate alternative ID: 1",
            "Alternative 1 links to non-existent ID: 9",
            "Alternative 1 missing context information",
            "Alternative 1 missing context information",
        ]

    def test_validate_when_link_is_not_an_integer_then_reported(self):
        """A "2b" link read from an upload is a dangling link, not a dropped one."""
        alts = [
            Alternative.from_dict({"answer": "a", "marks": 1, "alternative_id": 1, "linked_alternatives": ["2b"]}),
            Alternative.from_dict({"answer": "b", "marks": 1, "alternative_id": 2}),
        ]
        assert validate_answer_structure(2, alts) == ["Alternative 1 links to non-existent ID: 2b"]

    def test_validate_when_text_ids_repeat_then_duplicate_reported(self):
        alts = [Alternative("a", 1, "A"), Alternative("b", 1, "A")]
        assert validate_answer_structure(2, alts) == ["Duplicate alternative ID: A"]


class TestApplyAnswerStructure:
    """Tests for apply_answer_structure function."""

    def test_apply_when_valid_then_new_part_with_answers(self):
        part = Part("1(a)", PartKind.PART, marks=1)
        saved = apply_answer_structure(part, [Alternative("x", 1, 1)])
        assert saved.correct_answers == (Alternative("x", 1, 1),)
        assert part.correct_answers == ()

    def test_apply_when_invalid_then_raises_with_every_error(self):
        part = Part("1(a)", PartKind.PART, marks=1)
        with pytest.raises(AnswerStructureError) as exc_info:
            apply_answer_structure(part, [Alternative("x", 2, 1, (3,))])
        assert exc_info.value.errors == [
            "Total marks (2) don't match question marks (1)",
            "Alternative 1 links to non-existent ID: 3",
        ]
        assert isinstance(exc_info.value, ValueError)


class TestEditingHelpers:
    """Tests for add/remove/link/unlink helpers."""

    def test_next_id_when_gaps_and_text_ids_then_max_integer_plus_one(self):
        alts = [Alternative("a", 1, 1), Alternative("b", 1, 4), Alternative("c", 1, "x")]
        assert next_alternative_id(alts) == 5
        assert next_alternative_id([]) == 1

    def test_add_when_called_then_appends_standalone_with_next_id(self):
        alts = (Alternative("a", 1, 1), Alternative("b", 1, 3))
        added = add_alternative(alts, "B")

        assert added[:2] == alts
        new = added[2]
        assert new.alternative_id == 4
        assert new.marks == 1
        assert new.alternative_type == "standalone"
        assert new.context == AnswerContext(type="option", value="B")

    def test_add_when_empty_answer_then_general_context(self):
        added = add_alternative((), marks=2)
        assert added[0].alternative_id == 1
        assert added[0].context == AnswerContext(type="descriptive", value="general")

    def test_remove_when_linked_then_links_to_it_stripped(self):
        alts = (
            Alternative("a", 1, 1, (2, 3)),
            Alternative("b", 1, 2, (1,)),
            Alternative("c", 1, 3, (1,)),
        )
        remaining = remove_alternative(alts, 2)

        assert [alt.alternative_id for alt in remaining] == [1, 3]
        assert remaining[0].linked_alternatives == (3,)
        assert validate_answer_structure(2, remaining) == []

    def test_link_when_three_selected_then_each_links_to_others(self):
        alts = (Alternative("a", 1, 1), Alternative("b", 1, 2), Alternative("c", 1, 3), Alternative("d", 1, 4))
        linked = link_alternatives(alts, [1, 2, 3], "all_required")

        assert linked[0].linked_alternatives == (2, 3)
        assert linked[1].linked_alternatives == (1, 3)
        assert linked[2].linked_alternatives == (1, 2)
        assert {alt.alternative_type for alt in linked[:3]} == {"all_required"}
        assert linked[3] == alts[3]

    def test_link_when_fewer_than_two_or_bad_type_then_raises(self):
        alts = (Alternative("a", 1, 1), Alternative("b", 1, 2))
        with pytest.raises(ValueError, match="at least two"):
            link_alternatives(alts, [1, 1])
        with pytest.raises(ValueError, match="Unknown link group type"):
            link_alternatives(alts, [1, 2], "some_required")

    def test_unlink_when_pair_unlinked_then_both_directions_cleared(self):
        alts = link_alternatives(
            (Alternative("a", 1, 1), Alternative("b", 1, 2), Alternative("c", 1, 3)),
            [1, 2, 3],
        )
        unlinked = unlink_alternatives(alts, [1, 2])

        assert unlinked[0].linked_alternatives == (3,)
        assert unlinked[1].linked_alternatives == (3,)
        assert unlinked[2].linked_alternatives == (1, 2)
        assert unlinked[0].alternative_type == "one_required"

        alone = unlink_alternatives(unlinked, [1, 3])
        assert alone[0].linked_alternatives == ()
        assert alone[0].alternative_type == "standalone"

    @pytest.mark.parametrize(
        "answer, expected",
        [
            ("C", AnswerContext("option", "C")),
            ("point q", AnswerContext("position", "Q")),
            ("Step 2: divide", AnswerContext("step", "2")),
            ("9.8 m/s2", AnswerContext("measurement", "9.8 m/s2")),
            ("photosynthesis", AnswerContext("descriptive", "general")),
        ],
    )
    def test_detect_context_when_answer_pattern_then_context(self, answer, expected):
        assert detect_answer_context(answer) == expected
