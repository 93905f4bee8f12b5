"""
Unit Tests for Extraction Rules

Tests for individual rule predicates and the default rule list.
"""

import pytest

from paper_importer.compliance.config import ExtractionRulesConfig
from paper_importer.compliance.models import RuleCategory
from paper_importer.compliance.rules import (
    build_default_rules,
    check_alternative_linking,
    check_answer_format,
    check_context_required,
    check_forward_slash,
    check_hint_provided,
    check_mark_distribution,
    check_mcq_options,
    explain_alternative_linking,
    make_chemistry_states_check,
    make_figure_check,
    make_physics_units_check,
)
from paper_importer.core.models.answers import Alternative, AnswerContext, Option
from paper_importer.core.models.parts import Part, PartKind


def _node(**kwargs):
    return Part("1", PartKind.QUESTION, **kwargs)


class TestStructureRules:
    """Tests for structure predicates."""

    def test_forward_slash_when_unlinked_slash_answer_then_fails(self):
        assert not check_forward_slash(_node(correct_answers=(Alternative("red/blue", 1, 1),)))

    def test_forward_slash_when_slash_answer_is_linked_then_passes(self):
        alts = (Alternative("m/s", 1, 1, (2,)), Alternative("ms-1", 1, 2, (1,)))
        assert check_forward_slash(_node(correct_answers=alts))

    def test_linking_when_link_to_missing_id_then_fails_with_message(self):
        """A link to id 4 among ids 1-3 is dangling."""
        alts = (
            Alternative("a", 1, 1, (4,)),
            Alternative("b", 1, 2),
            Alternative("c", 1, 3),
        )
        part = _node(marks=3, correct_answers=alts)
        assert not check_alternative_linking(part)
        assert explain_alternative_linking(part) == "Alternative 1 links to non-existent ID: 4"

    def test_linking_when_self_link_then_passes(self):
        assert check_alternative_linking(_node(correct_answers=(Alternative("a", 1, 1, (1,)),)))

    def test_context_when_missing_value_then_fails(self):
        alts = (Alternative("a", 1, 1, context=AnswerContext(type="option")),)
        assert not check_context_required(_node(correct_answers=alts))

    def test_context_when_no_answers_then_passes(self):
        assert check_context_required(_node())

    def test_mark_distribution_when_no_answers_then_passes(self):
        assert check_mark_distribution(_node(marks=3))

    def test_mark_distribution_when_fractional_marks_then_exact(self):
        alts = (Alternative("a", 0.5, 1), Alternative("b", 0.5, 2))
        assert check_mark_distribution(_node(marks=1, correct_answers=alts))


class TestContentRules:
    """Tests for content predicates."""

    @pytest.mark.parametrize("question_type,answer_format,expected", [
        ("mcq", "", True),
        ("tf", "", True),
        ("descriptive", "", False),
        ("descriptive", "multi_line", True),
    ])
    def test_answer_format_when_types_then_expected(self, question_type, answer_format, expected):
        assert check_answer_format(_node(question_type=question_type, answer_format=answer_format)) is expected

    def test_figure_when_keyword_without_attachment_then_fails(self):
        check = make_figure_check(("diagram",))
        assert not check(_node(text="The DIAGRAM shows a cell."))
        assert check(_node(text="The diagram shows a cell.", attachments=("cell.png",)))

    def test_figure_when_attachment_on_descendant_then_passes(self):
        check = make_figure_check(("graph",))
        sub = Part("1(a)(i)", PartKind.SUBPART, attachments=("g.png",))
        part = Part("1(a)", PartKind.PART, children=(sub,))
        assert check(_node(text="Plot the graph.", children=(part,)))

    def test_figure_when_flagged_or_forced_then_needs_attachment(self):
        check = make_figure_check(())
        assert not check(_node(figure=True))
        assert not check(_node(figure_required=True))

    def test_figure_when_opted_out_then_passes(self):
        check = make_figure_check(("diagram",))
        assert check(_node(text="See the diagram.", figure=True, figure_required=False))

    def test_mcq_when_no_correct_option_then_fails(self):
        options = (Option("A", "x"), Option("B", "y"))
        assert not check_mcq_options(_node(question_type="mcq", options=options))
        options = (Option("A", "x"), Option("B", "y", is_correct=True))
        assert check_mcq_options(_node(question_type="mcq", options=options))

    def test_mcq_when_single_option_then_fails(self):
        options = (Option("A", "x", is_correct=True),)
        assert not check_mcq_options(_node(question_type="mcq", options=options))


class TestSubjectRules:
    """Tests for subject-specific predicates."""

    def test_physics_units_when_disabled_then_passes(self):
        check = make_physics_units_check(False)
        assert check(_node(question_type="calculation", correct_answers=(Alternative("12", 1, 1),)))

    def test_physics_units_when_enabled_then_value_needs_unit(self):
        check = make_physics_units_check(True)
        assert not check(_node(question_type="calculation", correct_answers=(Alternative("12", 1, 1),)))
        assert check(_node(question_type="calculation", correct_answers=(Alternative("12 N", 1, 1),)))
        assert check(_node(question_type="calculation", answer_format="number_with_unit"))

    def test_chemistry_states_when_equation_without_states_then_fails(self):
        check = make_chemistry_states_check(True)
        text = "Write the equation for the reaction."
        assert not check(_node(text=text, correct_answers=(Alternative("2H2 + O2 -> 2H2O", 2, 1),)))
        assert check(_node(text=text, correct_answers=(Alternative("2H2(g) + O2(g) -> 2H2O(l)", 2, 1),)))


class TestBuildDefaultRules:
    """Tests for build_default_rules."""

    def test_build_when_defaults_then_eleven_rules_in_order(self):
        rules = build_default_rules()
        assert [r.id for r in rules] == [
            "forward_slash",
            "alternative_linking",
            "context_required",
            "mark_distribution",
            "answer_format",
            "figure_detection",
            "mcq_options",
            "hint_provided",
            "explanation_provided",
            "physics_units",
            "chemistry_states",
        ]
        assert {r.category for r in rules} == set(RuleCategory)

    def test_build_when_subject_enabled_then_subject_rule_required(self):
        config = ExtractionRulesConfig.from_dict({"subjectSpecific": {"physics": True}})
        rules = {r.id: r for r in build_default_rules(config)}
        assert rules["physics_units"].required is True
        assert rules["chemistry_states"].required is False

    def test_build_when_defaults_then_structure_and_figure_rules_required(self):
        rules = {r.id: r for r in build_default_rules()}
        for rule_id in ("forward_slash", "alternative_linking", "context_required",
                        "mark_distribution", "figure_detection"):
            assert rules[rule_id].required is True

    @pytest.mark.parametrize(
        "config_data, rule_id",
        [
            ({"forwardSlashHandling": False}, "forward_slash"),
            ({"alternativeLinking": False}, "alternative_linking"),
            ({"answerStructure": {"validateLinking": False}}, "alternative_linking"),
            ({"contextRequired": False}, "context_required"),
            ({"answerStructure": {"requireContext": False}}, "context_required"),
            ({"answerStructure": {"validateMarks": False}}, "mark_distribution"),
            ({"figureDetection": False}, "figure_detection"),
        ],
    )
    def test_build_when_toggle_off_then_only_that_rule_optional(self, config_data, rule_id):
        """Turning a toggle off downgrades its rule; the rule list is unchanged."""
        rules = build_default_rules(ExtractionRulesConfig.from_dict(config_data))
        optional = {r.id for r in rules if not r.required}

        assert len(rules) == 11
        assert optional == {"answer_format", "physics_units", "chemistry_states", rule_id}

    def test_build_when_defaults_then_no_rule_fixable(self):
        assert not any(r.fixable for r in build_default_rules())

    def test_hint_when_whitespace_only_then_fails(self):
        assert not check_hint_provided(_node(hint="   "))
