"""
Module: compliance.summary

Purpose:
    Aggregates per-question results into paper-level statistics and
    filters results the way the review screen does (search, failed only,
    category).

Key Functions:
    - summarize(): ComplianceSummary over a set of results
    - filter_results(): Search / failed-only / category filtering

Used By:
    - compliance.report
    - cli: check command
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Sequence

from ..common.rounding import round_half_up
from ..core.models.questions import Question
from .models import ComplianceResult, ComplianceSummary
from .rules import ComplianceRule, build_default_rules

# Category filter value that keeps only fully compliant results
PASSED_CATEGORY = "passed"
ALL_CATEGORIES = "all"


def summarize(results: Mapping[str, ComplianceResult]) -> ComplianceSummary:
    """
    Aggregate compliance statistics.

    Args:
        results: Results keyed by question number

    Returns:
        ComplianceSummary (average is 0 for an empty paper)
    """
    scores = [result.score for result in results.values()]
    if not scores:
        return ComplianceSummary()

    return ComplianceSummary(
        total_questions=len(scores),
        fully_compliant=sum(1 for s in scores if s == 100),
        partially_compliant=sum(1 for s in scores if 0 < s < 100),
        non_compliant=sum(1 for s in scores if s == 0),
        average_score=round_half_up(sum(scores) / len(scores)),
    )


def _text_by_key(questions: Iterable[Question]) -> Dict[str, str]:
    """Question/part text keyed by question number and part label."""
    texts: Dict[str, str] = {}
    for question in questions:
        for part in question.all_parts:
            texts.setdefault(part.label, part.text)
        texts[question.question_number] = question.text
    return texts


def filter_results(
    results: Mapping[str, ComplianceResult],
    questions: Iterable[Question] = (),
    *,
    search: str = "",
    only_failed: bool = False,
    category: str = ALL_CATEGORIES,
    rules: Optional[Sequence[ComplianceRule]] = None,
) -> Dict[str, ComplianceResult]:
    """
    Filter results for review.

    Args:
        results: Results keyed by question number
        questions: Questions supplying text for the search
        search: Keep keys containing this, or whose text contains it
            (case-insensitive)
        only_failed: Drop results scoring 100
        category: "all", "passed" (score 100 only), or a rule category
            (at least one failure in that category)
        rules: Rules used to look up failure categories (defaults)

    Returns:
        Filtered results in their original order
    """
    texts = _text_by_key(questions)
    categories = {rule.id: str(rule.category) for rule in (rules or build_default_rules())}
    needle = search.lower()

    kept: Dict[str, ComplianceResult] = {}
    for key, result in results.items():
        if search and search not in key and needle not in texts.get(key, "").lower():
            continue
        if only_failed and result.score == 100:
            continue
        if category == PASSED_CATEGORY:
            if result.score != 100:
                continue
        elif category and category != ALL_CATEGORIES:
            if not any(categories.get(f.rule_id) == category for f in result.failed_rules):
                continue
        kept[key] = result
    return kept
