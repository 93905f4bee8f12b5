"""
Module: resolver.matcher

Purpose:
    Scores catalog data structures against extracted paper metadata and
    decides whether the best one is good enough to auto-select.

    Score per entry:
        +0.4 exact subject code, else +0.3 x subject name similarity (> 0.7)
        +0.3 x provider similarity (> 0.8)
        +0.3 x program similarity (> 0.8)

    All weights and cut-offs come from MatchThresholds.

Key Functions:
    - score_entry(): Score and "matched on" reasons for one entry
    - match_catalog(): Best entry and the accept / no-match decision

Dependencies:
    - paper_importer.common.text: similarity()
    - paper_importer.common.thresholds: MatchThresholds

Used By:
    - paper_importer.resolver.resolve_paper
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from ..common.rounding import round_half_up
from ..common.text import similarity
from ..common.thresholds import MATCH_THRESHOLDS, MatchThresholds
from ..core.models.catalog import CatalogEntry
from ..core.models.metadata import ExtractedMetadata
from .models import MatchResult

logger = logging.getLogger(__name__)


def score_entry(
    metadata: ExtractedMetadata,
    entry: CatalogEntry,
    thresholds: MatchThresholds = MATCH_THRESHOLDS,
) -> Tuple[float, List[str]]:
    """
    Score one catalog entry.

    Args:
        metadata: Extracted paper metadata
        entry: Candidate data structure
        thresholds: Weights and sub-score gates

    Returns:
        (score, matched_on) where matched_on lists the sub-scores that fired
    """
    score = 0.0
    matched_on: List[str] = []

    if metadata.subject_code and entry.subject.code == metadata.subject_code:
        score += thresholds.subject_code_weight
        matched_on.append(f"Subject code: {metadata.subject_code}")
    elif metadata.subject:
        subject_sim = similarity(metadata.subject, entry.subject.name)
        if subject_sim > thresholds.subject_name_min:
            score += thresholds.subject_name_weight * subject_sim
            matched_on.append(f"Subject: {entry.subject.name} ({round_half_up(subject_sim * 100)}% match)")

    provider_sim = similarity(metadata.provider, entry.provider.name)
    if provider_sim > thresholds.provider_min:
        score += thresholds.provider_weight * provider_sim
        matched_on.append(f"Provider: {entry.provider.name}")

    program_sim = similarity(metadata.program, entry.program.name)
    if program_sim > thresholds.program_min:
        score += thresholds.program_weight * program_sim
        matched_on.append(f"Program: {entry.program.name}")

    return score, matched_on


def match_catalog(
    metadata: ExtractedMetadata,
    entries: Iterable[CatalogEntry],
    thresholds: MatchThresholds = MATCH_THRESHOLDS,
) -> MatchResult:
    """
    Pick the best catalog entry for a paper.

    The first entry with the strictly highest score is kept. It is
    accepted when its score exceeds `thresholds.accept_score`; below
    `confident_score` the result carries suggestions for the reviewer.

    Args:
        metadata: Extracted paper metadata
        entries: Active catalog entries, in catalog order
        thresholds: Weights and decision cut-offs

    Returns:
        MatchResult (no-match is a normal result)
    """
    best: Optional[CatalogEntry] = None
    best_score = 0.0
    best_matched_on: List[str] = []

    for entry in entries:
        score, matched_on = score_entry(metadata, entry, thresholds)
        logger.debug(f"Entry {entry.id}: score {score:.3f} {matched_on}")
        if score > best_score:
            best, best_score, best_matched_on = entry, score, matched_on

    if best is None or best_score <= thresholds.accept_score:
        logger.info("No matching data structure found")
        return MatchResult.no_match()

    suggestions: List[str] = []
    if best_score < thresholds.confident_score:
        if metadata.subject_code and best.subject.code != metadata.subject_code:
            suggestions.append(
                f'Subject code mismatch: expected "{metadata.subject_code}", '
                f'found "{best.subject.code}"'
            )
        if best_score < thresholds.weak_score:
            suggestions.append("Consider creating a new data structure for better accuracy")

    confidence = min(best_score, 1.0)
    logger.info(f"Matched data structure {best.id} (confidence {confidence:.2f})")
    return MatchResult(
        data_structure_id=best.id,
        region_id=best.region.id,
        program_id=best.program.id,
        provider_id=best.provider.id,
        subject_id=best.subject.id,
        confidence=confidence,
        matched_on=tuple(best_matched_on),
        suggestions=tuple(suggestions),
    )
