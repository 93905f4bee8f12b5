"""
Module: compliance.engine

Purpose:
    Runs extraction rules against imported questions and scores them.

    Each rule runs through run_rule(), which turns the predicate's result
    (or exception) into a RuleOutcome. Outcomes are folded into a
    ComplianceResult without short-circuiting: a rule that raises is
    reported as a warning and every other rule still runs.

Key Functions:
    - run_rule(): One rule against one node -> RuleOutcome
    - select_rules(): Restrict a rule list to a subset of ids
    - evaluate_part(): Fold all rule outcomes for one node
    - evaluate_question(): Question-level result
    - evaluate_questions(): Results for a whole paper, keyed by number

Dependencies:
    - compliance.rules: Default rule list
    - common.rounding: Half-up score rounding

Used By:
    - cli: check command
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from ..common.mappings import MappingTables
from ..common.rounding import round_half_up
from ..core.models.parts import Part
from ..core.models.questions import Question
from .config import ExtractionRulesConfig
from .models import ComplianceFailure, ComplianceResult, ComplianceWarning, Severity
from .rules import ComplianceRule, build_default_rules

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"


@dataclass(frozen=True)
class RuleOutcome:
    """
    Result of running one rule against one node.

    Attributes:
        rule: The rule that ran
        status: PASSED, FAILED or ERRORED
        message: Failure explanation or exception text ("" when passed)
    """

    rule: ComplianceRule
    status: OutcomeStatus
    message: str = ""


def run_rule(rule: ComplianceRule, part: Part) -> RuleOutcome:
    """
    Run a rule predicate, converting any exception into an outcome.

    Args:
        rule: Rule to run
        part: Node to check

    Returns:
        RuleOutcome; never raises
    """
    try:
        passed = bool(rule.check(part))
    except Exception as e:
        logger.debug(f"Rule {rule.id} raised on {part.label}: {e!r}")
        return RuleOutcome(rule, OutcomeStatus.ERRORED, str(e) or type(e).__name__)

    if passed:
        return RuleOutcome(rule, OutcomeStatus.PASSED)

    message = rule.description
    if rule.explain is not None:
        try:
            message = rule.explain(part) or rule.description
        except Exception as e:
            logger.debug(f"Rule {rule.id} explain raised on {part.label}: {e!r}")
    return RuleOutcome(rule, OutcomeStatus.FAILED, message)


def select_rules(
    rules: Sequence[ComplianceRule],
    rule_ids: Optional[Iterable[str]] = None,
) -> List[ComplianceRule]:
    """
    Restrict rules to a subset of ids, keeping rule order.

    An empty or missing subset means all rules. Unknown ids are ignored
    with a warning and do not count towards the score denominator.
    """
    wanted = set(rule_ids or ())
    if not wanted:
        return list(rules)

    known = {rule.id for rule in rules}
    unknown = sorted(wanted - known)
    if unknown:
        logger.warning(f"Ignoring unknown rule ids: {', '.join(unknown)}")
    return [rule for rule in rules if rule.id in wanted]


def evaluate_part(part: Part, rules: Sequence[ComplianceRule], key: Optional[str] = None) -> ComplianceResult:
    """
    Evaluate already-selected rules against one node.

    Args:
        part: Node to check
        rules: Rules to consider (all of them count towards the score)
        key: Result key; defaults to the node label

    Returns:
        ComplianceResult
    """
    passed = 0
    failures: List[ComplianceFailure] = []
    warnings: List[ComplianceWarning] = []

    for rule in rules:
        outcome = run_rule(rule, part)
        if outcome.status == OutcomeStatus.PASSED:
            passed += 1
        elif outcome.status == OutcomeStatus.FAILED:
            failures.append(ComplianceFailure(
                rule_id=rule.id,
                rule_name=rule.name,
                message=outcome.message,
                severity=Severity.ERROR if rule.required else Severity.WARNING,
                fixable=rule.fixable,
            ))
        else:
            warnings.append(ComplianceWarning(
                rule_id=rule.id,
                message=f"Error checking rule: {outcome.message}",
            ))

    total = len(rules)
    score = round_half_up(passed / total * 100) if total else 0
    return ComplianceResult(
        question_number=key or part.label,
        total_rules=total,
        passed_rules=passed,
        failed_rules=tuple(failures),
        warnings=tuple(warnings),
        score=score,
    )


def evaluate_question(
    question: Question,
    rules: Sequence[ComplianceRule],
    rule_ids: Optional[Iterable[str]] = None,
) -> ComplianceResult:
    """Evaluate the question-level node, keyed by question number."""
    selected = select_rules(rules, rule_ids)
    return evaluate_part(question.question_node, selected, key=question.question_number)


def evaluate_questions(
    questions: Iterable[Question],
    config: Optional[ExtractionRulesConfig] = None,
    rule_ids: Optional[Iterable[str]] = None,
    *,
    rules: Optional[Sequence[ComplianceRule]] = None,
    include_parts: bool = False,
    tables: Optional[MappingTables] = None,
) -> Dict[str, ComplianceResult]:
    """
    Evaluate every question of a paper.

    Args:
        questions: Imported questions
        config: Extraction rules config for the default rules
        rule_ids: Optional subset of rule ids to consider
        rules: Custom rule list (replaces the defaults)
        include_parts: Also evaluate each part and subpart, keyed by label
        tables: Mapping tables for the default rules

    Returns:
        Results keyed by question number (and part label), in paper order
    """
    if rules is None:
        rules = build_default_rules(config, tables)
    selected = select_rules(rules, rule_ids)

    results: Dict[str, ComplianceResult] = {}
    for question in questions:
        if question.question_number in results:
            logger.warning(f"Duplicate question number {question.question_number}; keeping the last")
        results[question.question_number] = evaluate_part(
            question.question_node, selected, key=question.question_number
        )
        if include_parts:
            for part in question.all_parts[1:]:
                results[part.label] = evaluate_part(part, selected)

    logger.info(f"Checked {len(results)} items against {len(selected)} rules")
    return results
