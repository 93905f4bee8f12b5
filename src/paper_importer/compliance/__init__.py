"""
Compliance Engine

Checks imported questions against extraction rules before import, and
validates correct-answer alternatives on save. The guideline checklist
compares an upload's mark-scheme conventions with the rules config.
"""

from .answer_structure import (
    AnswerStructureError,
    add_alternative,
    apply_answer_structure,
    link_alternatives,
    remove_alternative,
    unlink_alternatives,
    validate_answer_structure,
)
from .config import ExtractionRulesConfig, load_rules_config
from .engine import (
    OutcomeStatus,
    RuleOutcome,
    evaluate_part,
    evaluate_question,
    evaluate_questions,
    run_rule,
    select_rules,
)
from .guidelines import (
    ChecklistItem,
    ChecklistStatus,
    GuidelineSummary,
    analyze_guidelines,
    build_checklist,
    suggest_rules_config,
)
from .models import (
    ComplianceFailure,
    ComplianceResult,
    ComplianceSummary,
    ComplianceWarning,
    RuleCategory,
    Severity,
)
from .report import build_report, write_report
from .rules import ComplianceRule, build_default_rules
from .summary import filter_results, summarize

__all__ = [
    "AnswerStructureError",
    "add_alternative",
    "apply_answer_structure",
    "link_alternatives",
    "remove_alternative",
    "unlink_alternatives",
    "validate_answer_structure",
    "ExtractionRulesConfig",
    "load_rules_config",
    "ChecklistItem",
    "ChecklistStatus",
    "GuidelineSummary",
    "analyze_guidelines",
    "build_checklist",
    "suggest_rules_config",
    "OutcomeStatus",
    "RuleOutcome",
    "evaluate_part",
    "evaluate_question",
    "evaluate_questions",
    "run_rule",
    "select_rules",
    "ComplianceFailure",
    "ComplianceResult",
    "ComplianceSummary",
    "ComplianceWarning",
    "RuleCategory",
    "Severity",
    "build_report",
    "write_report",
    "ComplianceRule",
    "build_default_rules",
    "filter_results",
    "summarize",
]
