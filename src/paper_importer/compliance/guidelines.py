"""
Module: compliance.guidelines

Purpose:
    Reads an uploaded paper for the mark-scheme conventions it uses
    (slash alternatives, linked answers, context metadata, Cambridge
    abbreviations, partial credit...) and compares them with the
    extraction rules config. Each detected convention becomes a checklist
    item that is satisfied when the matching toggle is on and a warning
    when it is off; conventions the upload does not use are optional.

    The scan works on the raw upload rather than on Part trees because
    it looks at fields the trees drop (marking flags, mark scheme lines,
    answer variations).

Key Classes:
    - GuidelineSummary: What the upload uses
    - ChecklistItem, ChecklistStatus: One requirement and its state

Key Functions:
    - analyze_guidelines(): Scan an upload
    - build_checklist(): Compare a summary with a config
    - suggest_rules_config(): Turn on the toggles an upload needs
    - normalize_exam_board(): "Cambridge", "Edexcel", "Both" or ""

Used By:
    - cli: guidelines command
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Mapping, Tuple

from .config import EducationalContent, ExtractionRulesConfig, SubjectSpecific

logger = logging.getLogger(__name__)

# Answer formats a person has to mark (drawings, uploads, tables...)
MANUAL_MARKING_FORMATS = frozenset({
    "diagram",
    "chemical_structure",
    "structural_diagram",
    "table",
    "graph",
    "multi_line",
    "multi_line_labeled",
    "file_upload",
    "audio",
    "code",
})

# Config key -> label shown for each abbreviation
ABBREVIATION_LABELS = {
    "owtte": "OWTTE",
    "ora": "ORA",
    "ecf": "ECF",
    "cao": "CAO",
}

_OWTTE = "Equivalent phrasing allowed"
_ORA = "Reverse argument accepted"
_ECF = "Error carried forward supported"
_CAO = "Correct answer only (CAO)"

_MARKING_FLAG_SIGNALS = (
    (("accepts_equivalent_phrasing", "owtte"), _OWTTE, "owtte"),
    (("accepts_reverse_argument", "ora"), _ORA, "ora"),
    (("error_carried_forward", "ecf"), _ECF, "ecf"),
    (("correct_answer_only", "cao"), _CAO, "cao"),
)
_REQUIREMENT_SIGNALS = (
    ("owtte", _OWTTE),
    ("ora", _ORA),
    ("ecf", _ECF),
    ("cao", _CAO),
)

_CAO_IN_TEXT_RE = re.compile(r"\(cao|(?:^|\s)cao(?:\s|$)|cao only")


def _has_word(text: str, token: str) -> bool:
    return re.search(rf"\b{token}\b", text, re.IGNORECASE) is not None


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ─────────────────────────────────────────────────────────────────────────────
# Summary
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GuidelineSummary:
    """
    Mark-scheme conventions found in one upload.

    Collections are sorted, except subjects which keep the order they
    were found in.
    """

    question_types: Tuple[str, ...] = ()
    answer_formats: Tuple[str, ...] = ()
    answer_requirements: Tuple[str, ...] = ()
    subjects: Tuple[str, ...] = ()
    exam_board: str = ""
    uses_forward_slash: bool = False
    uses_line_by_line_marking: bool = False
    uses_alternative_linking: bool = False
    includes_contextual_answers: bool = False
    includes_figures: bool = False
    includes_attachments: bool = False
    includes_hints: bool = False
    includes_explanations: bool = False
    requires_manual_marking: bool = False
    has_component_marking: bool = False
    has_multi_mark_allocations: bool = False
    partial_credit_detected: bool = False
    variation_signals: Tuple[str, ...] = ()
    abbreviations: Tuple[str, ...] = ()
    context_types: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "questionTypes": list(self.question_types),
            "answerFormats": list(self.answer_formats),
            "answerRequirements": list(self.answer_requirements),
            "subjectsDetected": list(self.subjects),
            "examBoard": self.exam_board,
            "usesForwardSlash": self.uses_forward_slash,
            "usesLineByLineMarking": self.uses_line_by_line_marking,
            "usesAlternativeLinking": self.uses_alternative_linking,
            "includesContextualAnswers": self.includes_contextual_answers,
            "includesFigures": self.includes_figures,
            "includesAttachments": self.includes_attachments,
            "includesHints": self.includes_hints,
            "includesExplanations": self.includes_explanations,
            "requiresManualMarking": self.requires_manual_marking,
            "hasComponentMarking": self.has_component_marking,
            "hasMultiMarkAllocations": self.has_multi_mark_allocations,
            "partialCreditDetected": self.partial_credit_detected,
            "variationSignals": list(self.variation_signals),
            "abbreviationsDetected": list(self.abbreviations),
            "contextTypesDetected": list(self.context_types),
        }


@dataclass
class _Scan:
    """Mutable accumulator for one analyze_guidelines call."""

    question_types: set = field(default_factory=set)
    answer_formats: set = field(default_factory=set)
    answer_requirements: set = field(default_factory=set)
    subjects: dict = field(default_factory=dict)
    variation_signals: set = field(default_factory=set)
    abbreviations: set = field(default_factory=set)
    context_types: set = field(default_factory=set)
    flags: dict = field(default_factory=dict)

    def flag(self, name: str) -> None:
        self.flags[name] = True

    def signal(self, label: str, abbreviation: str = "") -> None:
        self.variation_signals.add(label)
        if abbreviation:
            self.abbreviations.add(ABBREVIATION_LABELS[abbreviation])

    def add_subject(self, value: Any) -> None:
        if value:
            self.subjects.setdefault(str(value), None)

    def record_requirement(self, requirement: str) -> None:
        self.answer_requirements.add(requirement)
        text = requirement.lower()
        if "any" in text or "alternative" in text:
            self.flag("uses_alternative_linking")
        if "all" in text or "both" in text:
            self.flag("has_multi_mark_allocations")
        for token, label in _REQUIREMENT_SIGNALS:
            if _has_word(text, token):
                self.signal(label, token)

    def record_context(self, context: Any) -> None:
        self.flag("includes_contextual_answers")
        items = context if isinstance(context, list) else [context]
        for item in items:
            if isinstance(item, dict) and item.get("type"):
                self.context_types.add(str(item["type"]))

    def record_answer(self, answer: Mapping[str, Any]) -> None:
        raw = str(answer.get("answer") or "")
        text = raw.lower()

        if "/" in raw:
            self.flag("uses_forward_slash")
        if " or " in text or " and " in text:
            self.flag("uses_alternative_linking")
        if _is_number(answer.get("total_alternatives")) and answer["total_alternatives"] > 1:
            self.flag("uses_alternative_linking")
        if _list(answer.get("linked_alternatives")):
            self.flag("uses_alternative_linking")
        alternative_type = str(answer.get("alternative_type") or "").lower()
        if any(word in alternative_type for word in ("one", "any", "all", "both")):
            self.flag("uses_alternative_linking")

        if answer.get("context"):
            self.record_context(answer["context"])
            if isinstance(answer["context"], dict) and not answer["context"].get("type"):
                self.context_types.add("context")
        if answer.get("unit"):
            self.flag("includes_contextual_answers")
            self.context_types.add("unit")
        if answer.get("measurement_details"):
            self.flag("includes_contextual_answers")
            self.context_types.add("measurement")
        if answer.get("context_type"):
            self.flag("includes_contextual_answers")
            self.context_types.add(str(answer["context_type"]))

        if answer.get("line_number") is not None or answer.get("marking_point") is not None:
            self.flag("uses_line_by_line_marking")
        if _list(answer.get("marking_points")):
            self.flag("uses_line_by_line_marking")

        if answer.get("accepts_equivalent_phrasing") or answer.get("accepts_equivalent") or "owtte" in text:
            self.signal(_OWTTE, "owtte")
        if answer.get("accepts_reverse_argument") or "reverse argument" in text or _has_word(raw, "ora"):
            self.signal(_ORA, "ora")
        if answer.get("error_carried_forward") or "error carried forward" in text or _has_word(raw, "ecf"):
            self.signal(_ECF, "ecf")
        if "cao" in str(answer.get("accept_level") or "").lower():
            self.signal(_CAO, "cao")
        if _CAO_IN_TEXT_RE.search(text):
            self.abbreviations.add(ABBREVIATION_LABELS["cao"])

        if answer.get("conditional_on") or answer.get("conditions") or answer.get("marking_conditions"):
            self.signal("Conditional marking rules present")
        if _list(answer.get("rejected_answers")):
            self.signal("Reject list provided")
        if _list(answer.get("ignored_content")):
            self.signal("Ignore list provided")
        if answer.get("answer_variations"):
            self.signal("Documented answer variations")

        flags = answer.get("marking_flags")
        if isinstance(flags, dict):
            for keys, label, abbreviation in _MARKING_FLAG_SIGNALS:
                if any(flags.get(key) for key in keys):
                    self.signal(label, abbreviation)

        marks = answer.get("marks")
        if answer.get("partial_credit") or answer.get("partial_marking") or answer.get("partial_marks"):
            self.flag("partial_credit_detected")
        maximum = answer.get("maximum_marks_available")
        if _is_number(maximum) and _is_number(marks) and maximum != marks:
            self.flag("partial_credit_detected")
        if _is_number(marks) and marks > 1:
            self.flag("has_multi_mark_allocations")

        requirement = answer.get("answer_requirement")
        if isinstance(requirement, str):
            self.record_requirement(requirement)

    def walk(self, node: Any) -> None:
        if not isinstance(node, dict):
            return
        options = _list(node.get("options"))
        parts = _list(node.get("parts"))
        subparts = _list(node.get("subparts"))

        question_type = node.get("type") or node.get("question_type")
        if not question_type:
            if parts:
                question_type = "complex"
            elif options:
                question_type = "mcq"
            elif node.get("answer_format") == "true_false":
                question_type = "tf"
        if question_type:
            self.question_types.add(str(question_type))

        answer_format = node.get("answer_format")
        if answer_format:
            self.answer_formats.add(str(answer_format))
            if str(answer_format) in MANUAL_MARKING_FORMATS:
                self.flag("requires_manual_marking")

        requirement = node.get("answer_requirement")
        if requirement:
            self.record_requirement(str(requirement))

        if node.get("context"):
            self.record_context(node["context"])
        if isinstance(node.get("context_fields"), list):
            self.record_context(node["context_fields"])

        if node.get("figure") or node.get("figure_required"):
            self.flag("includes_figures")
        attachments = node.get("attachments")
        if (isinstance(attachments, list) and attachments) or (isinstance(attachments, str) and attachments.strip()):
            self.flag("includes_attachments")
        if node.get("hint"):
            self.flag("includes_hints")
        if node.get("explanation"):
            self.flag("includes_explanations")
        if node.get("requires_manual_marking"):
            self.flag("requires_manual_marking")

        self.add_subject(node.get("subject"))
        self.add_subject(node.get("subject_code"))

        if any(node.get(key) for key in (
            "partial_credit", "partial_marking", "partial_mark_distribution", "partial_marks",
        )):
            self.flag("partial_credit_detected")

        mark_scheme = node.get("mark_scheme")
        if (
            _list(node.get("marking_points"))
            or _list(mark_scheme)
            or (isinstance(mark_scheme, str) and "\n" in mark_scheme)
            or node.get("line_by_line") is True
        ):
            self.flag("uses_line_by_line_marking")

        marks = node.get("marks")
        if _is_number(marks) and marks > 1:
            self.flag("has_multi_mark_allocations")

        answers = [item for item in _list(node.get("correct_answers")) if isinstance(item, dict)]
        if answers:
            if len(answers) > 1:
                self.flag("uses_line_by_line_marking")
            for answer in answers:
                self.record_answer(answer)
        elif node.get("correct_answer"):
            self.record_answer({
                "answer": node["correct_answer"],
                "marks": marks,
                "answer_requirement": node.get("answer_requirement"),
            })

        for children in (parts, subparts):
            if not children:
                continue
            self.flag("has_component_marking")
            for child in children:
                if isinstance(child, dict) and _is_number(child.get("marks")) and child["marks"] > 0:
                    self.flag("has_multi_mark_allocations")
                self.walk(child)


def normalize_exam_board(value: Any) -> str:
    """
    Map a free-text exam board to "Cambridge", "Edexcel" or "Both".

    Returns "" when neither board is recognised.
    """
    text = str(value or "").lower()
    cambridge = "cambridge" in text or _has_word(text, "cie")
    edexcel = "edexcel" in text or "pearson" in text
    if "cambridge" in text and "edexcel" in text:
        return "Both"
    if cambridge:
        return "Cambridge"
    if edexcel:
        return "Edexcel"
    return ""


def analyze_guidelines(payload: Mapping[str, Any]) -> GuidelineSummary:
    """
    Scan an uploaded paper for the mark-scheme conventions it uses.

    Args:
        payload: Parsed upload JSON (paper fields plus "questions")

    Returns:
        GuidelineSummary for the whole upload

    Example:
        >>> summary = analyze_guidelines({"questions": [
        ...     {"marks": 1, "correct_answers": [{"answer": "red/blue", "marks": 1}]}
        ... ]})
        >>> summary.uses_forward_slash
        True
    """
    scan = _Scan()
    for question in _list(payload.get("questions")):
        scan.walk(question)

    for section in (payload, payload.get("paper_metadata"), payload.get("metadata")):
        if isinstance(section, dict):
            scan.add_subject(section.get("subject"))
            scan.add_subject(section.get("subject_code"))

    paper_metadata = payload.get("paper_metadata")
    raw_board = (
        payload.get("exam_board")
        or payload.get("board")
        or (paper_metadata.get("exam_board") if isinstance(paper_metadata, dict) else None)
    )

    flags = scan.flags
    summary = GuidelineSummary(
        question_types=tuple(sorted(scan.question_types)),
        answer_formats=tuple(sorted(scan.answer_formats)),
        answer_requirements=tuple(sorted(scan.answer_requirements)),
        subjects=tuple(scan.subjects),
        exam_board=normalize_exam_board(raw_board) or str(raw_board or "").strip(),
        uses_forward_slash=flags.get("uses_forward_slash", False),
        uses_line_by_line_marking=flags.get("uses_line_by_line_marking", False),
        uses_alternative_linking=flags.get("uses_alternative_linking", False),
        includes_contextual_answers=(
            flags.get("includes_contextual_answers", False) or bool(scan.context_types)
        ),
        includes_figures=flags.get("includes_figures", False),
        includes_attachments=flags.get("includes_attachments", False),
        includes_hints=flags.get("includes_hints", False),
        includes_explanations=flags.get("includes_explanations", False),
        requires_manual_marking=flags.get("requires_manual_marking", False),
        has_component_marking=flags.get("has_component_marking", False),
        has_multi_mark_allocations=flags.get("has_multi_mark_allocations", False),
        partial_credit_detected=flags.get("partial_credit_detected", False),
        variation_signals=tuple(sorted(scan.variation_signals)),
        abbreviations=tuple(sorted(scan.abbreviations)),
        context_types=tuple(sorted(scan.context_types)),
    )
    logger.debug(f"Guideline scan found {len(summary.question_types)} question types, "
                 f"abbreviations {list(summary.abbreviations)}")
    return summary


# ─────────────────────────────────────────────────────────────────────────────
# Checklist
# ─────────────────────────────────────────────────────────────────────────────

class ChecklistStatus(str, Enum):
    SATISFIED = "satisfied"  # Convention used and its toggle is on
    WARNING = "warning"      # Convention used but its toggle is off
    OPTIONAL = "optional"    # Convention not used by this upload

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChecklistItem:
    """One guideline requirement and how the config meets it."""

    label: str
    description: str
    status: ChecklistStatus
    group: str = "core"

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "description": self.description,
            "status": self.status.value,
            "group": self.group,
        }


def _item(label: str, detected: bool, enabled: bool, used: str, unused: str, group: str) -> ChecklistItem:
    if not detected:
        return ChecklistItem(label, unused, ChecklistStatus.OPTIONAL, group)
    status = ChecklistStatus.SATISFIED if enabled else ChecklistStatus.WARNING
    return ChecklistItem(label, used, status, group)


def build_checklist(summary: GuidelineSummary, config: ExtractionRulesConfig) -> List[ChecklistItem]:
    """
    Compare an upload's conventions with the extraction rules config.

    Args:
        summary: Result of analyze_guidelines
        config: Config the import will run with

    Returns:
        Six core items followed by five mark scheme items
    """
    structure = config.answer_structure
    scheme = config.mark_scheme
    abbreviations_enabled = all(
        getattr(config.abbreviations, key)
        for key, label in ABBREVIATION_LABELS.items()
        if label in summary.abbreviations
    )
    variations = ", ".join(summary.variation_signals)
    detected_abbreviations = ", ".join(summary.abbreviations)

    return [
        _item(
            "Forward slash alternatives handled",
            summary.uses_forward_slash,
            config.forward_slash_handling,
            "Detected mark-scheme slashes. Split answers must map to alternative IDs.",
            "No slash-based alternatives detected.",
            "core",
        ),
        _item(
            "Line-by-line mark scheme support",
            summary.uses_line_by_line_marking,
            config.line_by_line_processing,
            "Multiple marking points detected. Keep one marking point per line.",
            "No multi-line marking points found.",
            "core",
        ),
        _item(
            "Linked alternatives logic",
            summary.uses_alternative_linking,
            config.alternative_linking and structure.validate_linking,
            "Detected AND/OR logic or \"any from\" statements. Alternative chains must be kept.",
            "No linking patterns detected.",
            "core",
        ),
        _item(
            "Context-aware marking",
            summary.includes_contextual_answers,
            config.context_required and structure.require_context,
            "Some answers carry context metadata (units, conditions). Require context to keep it.",
            "No contextual metadata detected in answers.",
            "core",
        ),
        _item(
            "Variation and alternative acceptance",
            bool(summary.variation_signals),
            structure.accept_alternatives,
            f"Detected: {variations}. Alternative acceptance must stay enabled.",
            "No variation flags detected.",
            "core",
        ),
        _item(
            "Figure and attachment alignment",
            summary.includes_figures or summary.includes_attachments,
            config.figure_detection,
            "Questions reference diagrams, tables or uploads. Keep figure detection enabled.",
            "No figure dependencies detected.",
            "core",
        ),
        _item(
            "Manual marking readiness",
            summary.requires_manual_marking,
            scheme.requires_manual_marking,
            "Detected drawing, structural or upload answer formats that need a reviewer.",
            "All detected answers are auto-markable.",
            "mark_scheme",
        ),
        _item(
            "Component marking structure",
            summary.has_component_marking,
            scheme.component_marking,
            "Parts or sub-parts detected. Keep component-level score aggregation.",
            "No multi-part structures detected.",
            "mark_scheme",
        ),
        _item(
            "Mark allocation validation",
            summary.has_multi_mark_allocations,
            structure.validate_marks and scheme.marking_criteria,
            "Variable mark allocations detected. Keep mark validation on.",
            "All questions appear single-mark.",
            "mark_scheme",
        ),
        _item(
            "Cambridge abbreviation coverage",
            bool(summary.abbreviations),
            abbreviations_enabled,
            f"Detected: {detected_abbreviations}. Enable the matching abbreviation processors.",
            "No Cambridge abbreviations present.",
            "mark_scheme",
        ),
        _item(
            "Partial credit readiness",
            summary.partial_credit_detected,
            scheme.marking_criteria,
            "Partial credit logic detected. Keep mark criteria validation enabled.",
            "No partial credit rules detected.",
            "mark_scheme",
        ),
    ]


def suggest_rules_config(summary: GuidelineSummary, config: ExtractionRulesConfig) -> ExtractionRulesConfig:
    """
    Turn on every toggle the upload's conventions need.

    Toggles are only switched on, never off, except the educational
    content and subject sections which follow the upload exactly.

    Args:
        summary: Result of analyze_guidelines
        config: Current config

    Returns:
        New config; equal to config when nothing needs to change
    """
    linking = summary.uses_alternative_linking or bool(summary.answer_requirements)
    mark_checks = summary.has_multi_mark_allocations or summary.partial_credit_detected
    subjects = [subject.lower() for subject in summary.subjects]

    abbreviations = config.abbreviations
    for key, label in ABBREVIATION_LABELS.items():
        if label in summary.abbreviations:
            abbreviations = replace(abbreviations, **{key: True})

    structure = config.answer_structure
    scheme = config.mark_scheme
    suggested = replace(
        config,
        forward_slash_handling=config.forward_slash_handling or summary.uses_forward_slash,
        line_by_line_processing=config.line_by_line_processing or summary.uses_line_by_line_marking,
        alternative_linking=config.alternative_linking or linking,
        figure_detection=config.figure_detection or summary.includes_figures or summary.includes_attachments,
        context_required=config.context_required or summary.includes_contextual_answers,
        educational_content=EducationalContent(
            hints_required=summary.includes_hints,
            explanations_required=summary.includes_explanations,
        ),
        subject_specific=SubjectSpecific(
            physics=any("physics" in subject for subject in subjects),
            chemistry=any("chemistry" in subject for subject in subjects),
        ),
        abbreviations=abbreviations,
        answer_structure=replace(
            structure,
            require_context=structure.require_context or summary.includes_contextual_answers,
            validate_linking=structure.validate_linking or linking,
            accept_alternatives=(
                structure.accept_alternatives
                or bool(summary.variation_signals)
                or summary.uses_alternative_linking
            ),
            validate_marks=structure.validate_marks or mark_checks,
        ),
        mark_scheme=replace(
            scheme,
            requires_manual_marking=scheme.requires_manual_marking or summary.requires_manual_marking,
            component_marking=scheme.component_marking or summary.has_component_marking,
            marking_criteria=scheme.marking_criteria or mark_checks,
        ),
    )
    if suggested != config:
        logger.info("Suggested extraction rules differ from the current config")
    return suggested
