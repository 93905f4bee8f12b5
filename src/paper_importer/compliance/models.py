"""
Module: compliance.models

Purpose:
    Result records of the compliance engine. Serialize with the camelCase
    keys of the exported report.

Key Classes:
    - ComplianceFailure: One failed rule
    - ComplianceWarning: One rule that could not be checked
    - ComplianceResult: Per-question (or per-part) outcome and score
    - ComplianceSummary: Aggregate over all questions

Used By:
    - compliance.engine
    - compliance.summary
    - compliance.report
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class RuleCategory(str, Enum):
    """Rule grouping used for filtering."""
    STRUCTURE = "structure"
    CONTENT = "content"
    EDUCATIONAL = "educational"
    SUBJECT = "subject"

    def __str__(self) -> str:
        return self.value


class Severity(str, Enum):
    ERROR = "error"      # Failed required rule; blocks import
    WARNING = "warning"  # Failed optional rule

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ComplianceFailure:
    """
    A rule whose predicate returned False.

    Attributes:
        rule_id: Rule identifier, e.g. "mark_distribution"
        rule_name: Display name
        message: Specific explanation or the rule description
        severity: ERROR when the rule is required, else WARNING
        fixable: The rule declares an auto-fix hook
    """

    rule_id: str
    rule_name: str
    message: str
    severity: Severity
    fixable: bool = False

    def to_dict(self) -> dict:
        return {
            "ruleId": self.rule_id,
            "ruleName": self.rule_name,
            "message": self.message,
            "severity": self.severity.value,
            "fixable": self.fixable,
        }


@dataclass(frozen=True)
class ComplianceWarning:
    """A rule whose predicate raised; the rule is neither passed nor failed."""

    rule_id: str
    message: str

    def to_dict(self) -> dict:
        return {"ruleId": self.rule_id, "message": self.message}


@dataclass(frozen=True)
class ComplianceResult:
    """
    Compliance outcome for one question (or one part).

    Attributes:
        question_number: Report key ("1", or "1(a)" for part results)
        total_rules: Rules considered (the score denominator)
        passed_rules: Rules whose predicate returned True
        failed_rules: Failures in rule order
        warnings: Rules that raised, in rule order
        score: round_half_up(passed / total * 100), 0 when total is 0
    """

    question_number: str
    total_rules: int
    passed_rules: int
    failed_rules: Tuple[ComplianceFailure, ...] = ()
    warnings: Tuple[ComplianceWarning, ...] = ()
    score: int = 0

    @property
    def has_errors(self) -> bool:
        """Any required rule failed."""
        return any(f.severity == Severity.ERROR for f in self.failed_rules)

    @property
    def is_fully_compliant(self) -> bool:
        return self.score == 100

    def to_dict(self) -> dict:
        return {
            "questionNumber": self.question_number,
            "totalRules": self.total_rules,
            "passedRules": self.passed_rules,
            "failedRules": [f.to_dict() for f in self.failed_rules],
            "warnings": [w.to_dict() for w in self.warnings],
            "score": self.score,
        }


@dataclass(frozen=True)
class ComplianceSummary:
    """Aggregate statistics over a set of question results."""

    total_questions: int = 0
    fully_compliant: int = 0
    partially_compliant: int = 0
    non_compliant: int = 0
    average_score: int = 0

    def to_dict(self) -> dict:
        return {
            "totalQuestions": self.total_questions,
            "fullyCompliant": self.fully_compliant,
            "partiallyCompliant": self.partially_compliant,
            "nonCompliant": self.non_compliant,
            "averageScore": self.average_score,
        }
