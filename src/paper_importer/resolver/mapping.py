"""
Module: resolver.mapping

Purpose:
    Dictionary-assisted mapping of free-text metadata to canonical values.
    Provider and program use fuzzy similarity against every table key;
    session uses exact then containment lookup; paper type uses keyword
    detection in the paper name.

Key Functions:
    - map_with_dictionary(): Best-scoring table value, or the input
    - map_provider() / map_program(): Exam board / qualification mapping
    - map_session(): Session abbreviation ("May/June 2023" -> "M/J")
    - detect_paper_type(): Paper type from paper-name keywords

Dependencies:
    - paper_importer.common.text: similarity()
    - paper_importer.common.mappings: Default tables

Used By:
    - paper_importer.resolver.extraction
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..common.mappings import MappingTables, default_mapping_tables
from ..common.text import similarity
from ..common.thresholds import MATCH_THRESHOLDS, MatchThresholds

logger = logging.getLogger(__name__)


def map_with_dictionary(
    value: Optional[str],
    table: Mapping[str, str],
    accept: float = MATCH_THRESHOLDS.mapping_accept,
) -> str:
    """
    Map a label through a variant table with fuzzy fallback.

    Every key is scored with similarity(); the highest score wins and the
    first key keeps a tie. The mapped value is used only when the best
    score exceeds `accept`; otherwise the input passes through unchanged.

    Args:
        value: Raw label, e.g. "cambridge assessment"
        table: Lowercase variant -> canonical value
        accept: Minimum (exclusive) score for a mapping

    Returns:
        Canonical value or the original input

    Example:
        >>> map_with_dictionary("CIE", {"cie": "Cambridge International (CIE)"})
        'Cambridge International (CIE)'
    """
    if not value:
        return ""

    lowered = value.lower()
    best_value = ""
    best_score = 0.0
    for key, canonical in table.items():
        score = similarity(lowered, key)
        if score > best_score:
            best_score = score
            best_value = canonical

    if best_score > accept:
        logger.debug(f"Mapped {value!r} -> {best_value!r} (score {best_score:.2f})")
        return best_value

    logger.debug(f"No mapping for {value!r} (best score {best_score:.2f})")
    return value


def map_provider(
    exam_board: Optional[str],
    tables: Optional[MappingTables] = None,
    thresholds: MatchThresholds = MATCH_THRESHOLDS,
) -> str:
    tables = tables or default_mapping_tables()
    return map_with_dictionary(exam_board, tables.providers, thresholds.mapping_accept)


def map_program(
    qualification: Optional[str],
    tables: Optional[MappingTables] = None,
    thresholds: MatchThresholds = MATCH_THRESHOLDS,
) -> str:
    tables = tables or default_mapping_tables()
    return map_with_dictionary(qualification, tables.programs, thresholds.mapping_accept)


def map_session(session: Optional[str], tables: Optional[MappingTables] = None) -> str:
    """
    Abbreviate an exam session.

    Exact lookup on the lowercased, trimmed input first, then the first
    table key contained in the input; otherwise the input is returned.

    Example:
        >>> map_session("May/June")
        'M/J'
        >>> map_session("october/november 2022")
        'O/N'
    """
    if not session:
        return ""
    tables = tables or default_mapping_tables()

    lowered = session.lower().strip()
    if lowered in tables.sessions:
        return tables.sessions[lowered]
    for key, abbreviation in tables.sessions.items():
        if key in lowered:
            return abbreviation
    return session


def detect_paper_type(paper_name: Optional[str], tables: Optional[MappingTables] = None) -> str:
    """
    Detect the paper type from keywords in the paper name.

    The first type (table order) with a keyword contained in the
    lowercased name wins. Unrecognised names are returned as-is.

    Example:
        >>> detect_paper_type("Paper 2 Multiple Choice (Extended)")
        'Multiple Choice'
    """
    if not paper_name:
        return ""
    tables = tables or default_mapping_tables()

    lowered = paper_name.lower()
    for paper_type, keywords in tables.paper_types.items():
        if any(keyword in lowered for keyword in keywords):
            return paper_type
    return paper_name
