"""
Module: compliance.rules

Purpose:
    Declarative extraction rules checked against every imported question
    node. Each rule is a predicate over one Part plus display data
    (name, description, category) and a required flag that decides
    whether a failure is an error or a warning.

    The default list is built from an ExtractionRulesConfig: the required
    flag of the structure, figure, educational and subject rules comes
    from configuration, so the same failing condition is an error under
    one config and a warning under another. The rule list itself never
    changes, so scores stay comparable across configs.

Key Classes:
    - ComplianceRule: One rule

Key Functions:
    - build_default_rules(): Ordered default rule list for a config
    - Individual predicates (check_*) for direct use and testing

Dependencies:
    - paper_importer.common.mappings: Figure keywords

Used By:
    - compliance.engine
    - compliance.summary (category lookup)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..common.mappings import MappingTables, default_mapping_tables
from ..core.models.answers import AlternativeId
from ..core.models.parts import Part
from .config import ExtractionRulesConfig
from .models import RuleCategory

# Number followed by letters: "9.8 m/s2", "12 N", "5kg"
_VALUE_WITH_UNIT_RE = re.compile(r"\d+\s*[a-zA-Z]+")
_STATE_SYMBOL_RE = re.compile(r"\(s\)|\(l\)|\(g\)|\(aq\)")


@dataclass(frozen=True)
class ComplianceRule:
    """
    One extraction rule.

    Attributes:
        id: Stable identifier used for subsets and reports
        name: Display name
        description: Default failure message
        category: Filter group
        required: Failure severity is error when True, warning otherwise
        check: Predicate over one node; True means compliant
        explain: Optional specific failure message for a node
        fix: Optional auto-fix hook; only its presence is reported
    """

    id: str
    name: str
    description: str
    category: RuleCategory
    required: bool
    check: Callable[[Part], bool]
    explain: Optional[Callable[[Part], Optional[str]]] = None
    fix: Optional[Callable[[Part], Part]] = None

    @property
    def fixable(self) -> bool:
        return self.fix is not None


# ─────────────────────────────────────────────────────────────────────────────
# Structure
# ─────────────────────────────────────────────────────────────────────────────

def check_forward_slash(part: Part) -> bool:
    """An answer containing "/" must be split into linked alternatives."""
    return not any(
        "/" in alt.answer and not alt.linked_alternatives
        for alt in part.correct_answers
    )


def dangling_links(part: Part) -> List[tuple[AlternativeId, AlternativeId]]:
    """(alternative id, missing linked id) pairs, in answer order."""
    ids = set(part.alternative_ids)
    return [
        (alt.alternative_id, linked)
        for alt in part.correct_answers
        for linked in alt.linked_alternatives
        if linked not in ids
    ]


def check_alternative_linking(part: Part) -> bool:
    return not dangling_links(part)


def explain_alternative_linking(part: Part) -> Optional[str]:
    missing = dangling_links(part)
    if not missing:
        return None
    return "; ".join(
        f"Alternative {alt_id} links to non-existent ID: {linked}" for alt_id, linked in missing
    )


def check_context_required(part: Part) -> bool:
    return all(
        alt.context is not None and alt.context.is_complete
        for alt in part.correct_answers
    )


def check_mark_distribution(part: Part) -> bool:
    """Alternative marks sum exactly to the node's marks; no answers passes."""
    if not part.correct_answers:
        return True
    return part.alternative_marks == part.marks


def explain_mark_distribution(part: Part) -> Optional[str]:
    return f"Total marks ({part.alternative_marks}) don't match question marks ({part.marks})"


# ─────────────────────────────────────────────────────────────────────────────
# Content
# ─────────────────────────────────────────────────────────────────────────────

def check_answer_format(part: Part) -> bool:
    if part.question_type in ("mcq", "tf"):
        return True
    return bool(part.answer_format)


def make_figure_check(keywords: Sequence[str]) -> Callable[[Part], bool]:
    """
    Build the figure-detection predicate for a keyword list.

    A node needs a figure when its text contains a keyword
    (case-insensitive), the source flagged `figure`, or a reviewer set
    `figure_required`. It then needs an attachment on itself or any
    descendant. `figure_required=False` opts the node out.
    """
    words = tuple(word.lower() for word in keywords)

    def check_figure_detection(part: Part) -> bool:
        if part.figure_required is False:
            return True
        text = part.text.lower()
        needs_figure = (
            bool(part.figure_required)
            or part.figure
            or any(word in text for word in words)
        )
        if needs_figure:
            return part.has_attachments_in_subtree
        return True

    return check_figure_detection


def check_mcq_options(part: Part) -> bool:
    if part.question_type != "mcq":
        return True
    return len(part.options) >= 2 and any(opt.is_correct for opt in part.options)


# ─────────────────────────────────────────────────────────────────────────────
# Educational
# ─────────────────────────────────────────────────────────────────────────────

def check_hint_provided(part: Part) -> bool:
    return bool(part.hint.strip())


def check_explanation_provided(part: Part) -> bool:
    return bool(part.explanation.strip())


# ─────────────────────────────────────────────────────────────────────────────
# Subject
# ─────────────────────────────────────────────────────────────────────────────

def make_physics_units_check(enabled: bool) -> Callable[[Part], bool]:
    def check_physics_units(part: Part) -> bool:
        if not enabled or part.question_type != "calculation":
            return True
        return "unit" in part.answer_format or any(
            _VALUE_WITH_UNIT_RE.search(alt.answer) for alt in part.correct_answers
        )

    return check_physics_units


def make_chemistry_states_check(enabled: bool) -> Callable[[Part], bool]:
    def check_chemistry_states(part: Part) -> bool:
        if not enabled or "equation" not in part.text.lower():
            return True
        return any(_STATE_SYMBOL_RE.search(alt.answer) for alt in part.correct_answers)

    return check_chemistry_states


# ─────────────────────────────────────────────────────────────────────────────
# Default rule list
# ─────────────────────────────────────────────────────────────────────────────

def build_default_rules(
    config: Optional[ExtractionRulesConfig] = None,
    tables: Optional[MappingTables] = None,
) -> List[ComplianceRule]:
    """
    Build the ordered default rule list.

    Args:
        config: Extraction rules config (defaults apply when None)
        tables: Mapping tables providing figure keywords

    Returns:
        Rules in evaluation order
    """
    config = config or ExtractionRulesConfig()
    tables = tables or default_mapping_tables()
    structure = config.answer_structure
    physics = config.subject_specific.physics
    chemistry = config.subject_specific.chemistry

    return [
        ComplianceRule(
            id="forward_slash",
            name="Forward Slash Handling",
            description="Each segment between slashes must be a separate answer",
            category=RuleCategory.STRUCTURE,
            required=config.forward_slash_handling,
            check=check_forward_slash,
        ),
        ComplianceRule(
            id="alternative_linking",
            name="Alternative Linking",
            description="Linked alternatives must have valid references",
            category=RuleCategory.STRUCTURE,
            required=config.alternative_linking and structure.validate_linking,
            check=check_alternative_linking,
            explain=explain_alternative_linking,
        ),
        ComplianceRule(
            id="context_required",
            name="Context Information",
            description="All answers must have context metadata",
            category=RuleCategory.STRUCTURE,
            required=config.context_required and structure.require_context,
            check=check_context_required,
        ),
        ComplianceRule(
            id="mark_distribution",
            name="Mark Distribution",
            description="Answer marks must sum to question total",
            category=RuleCategory.STRUCTURE,
            required=structure.validate_marks,
            check=check_mark_distribution,
            explain=explain_mark_distribution,
        ),
        ComplianceRule(
            id="answer_format",
            name="Answer Format Specified",
            description="Answer format should match question type",
            category=RuleCategory.CONTENT,
            required=False,
            check=check_answer_format,
        ),
        ComplianceRule(
            id="figure_detection",
            name="Figure Detection",
            description="Questions mentioning diagrams must have attachments",
            category=RuleCategory.CONTENT,
            required=config.figure_detection,
            check=make_figure_check(tables.figure_keywords),
        ),
        ComplianceRule(
            id="mcq_options",
            name="MCQ Options Valid",
            description="MCQ questions must have options with correct answer marked",
            category=RuleCategory.CONTENT,
            required=True,
            check=check_mcq_options,
        ),
        ComplianceRule(
            id="hint_provided",
            name="Educational Hint",
            description="Questions should have hints for learning support",
            category=RuleCategory.EDUCATIONAL,
            required=config.educational_content.hints_required,
            check=check_hint_provided,
        ),
        ComplianceRule(
            id="explanation_provided",
            name="Educational Explanation",
            description="Questions should have detailed explanations",
            category=RuleCategory.EDUCATIONAL,
            required=config.educational_content.explanations_required,
            check=check_explanation_provided,
        ),
        ComplianceRule(
            id="physics_units",
            name="Physics Units Required",
            description="Physics calculations must specify units",
            category=RuleCategory.SUBJECT,
            required=physics,
            check=make_physics_units_check(physics),
        ),
        ComplianceRule(
            id="chemistry_states",
            name="Chemistry State Symbols",
            description="Chemical equations should include state symbols",
            category=RuleCategory.SUBJECT,
            required=chemistry,
            check=make_chemistry_states_check(chemistry),
        ),
    ]
