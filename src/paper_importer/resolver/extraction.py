"""
Module: resolver.extraction

Purpose:
    Pulls ExtractedMetadata out of an uploaded paper's top-level fields.
    Splits combined fields ("Physics - 0625", "0625/42"), detects the
    paper type, maps exam board / qualification / session to canonical
    values and derives a display title.

Key Functions:
    - extract_metadata(): Raw upload fields -> ExtractedMetadata
    - validate_metadata(): Completeness messages for reviewer display

Dependencies:
    - paper_importer.resolver.mapping: Canonical value mapping
    - paper_importer.common.mappings: Subject code table

Used By:
    - paper_importer.resolver.resolve_paper
    - paper_importer.cli
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Optional

from ..common.mappings import MappingTables, default_mapping_tables
from ..common.thresholds import MATCH_THRESHOLDS, MatchThresholds
from ..core.models.metadata import ExtractedMetadata
from .mapping import detect_paper_type, map_program, map_provider, map_session

logger = logging.getLogger(__name__)

# "Physics - 0625" / "Physics – 0625"
_SUBJECT_DASH_CODE_RE = re.compile(r"(.+?)\s*[-–]\s*(\d+)$")
# "Physics (0625)"
_SUBJECT_PAREN_CODE_RE = re.compile(r"(.+?)\s*\((\d+)\)$")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """First truthy value among snake_case/camelCase key variants."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(raw: Mapping[str, Any], *keys: str) -> str:
    value = _first(raw, *keys)
    return str(value).strip() if value is not None else ""


def _leading_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a value ("2023 ", "80 marks")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def split_subject(subject: str) -> tuple[str, str]:
    """
    Split a trailing syllabus code off a subject label.

    Example:
        >>> split_subject("Physics - 0625")
        ('Physics', '0625')
        >>> split_subject("Chemistry (0620)")
        ('Chemistry', '0620')
        >>> split_subject("Biology")
        ('Biology', '')
    """
    for pattern in (_SUBJECT_DASH_CODE_RE, _SUBJECT_PAREN_CODE_RE):
        match = pattern.match(subject)
        if match:
            return match.group(1).strip(), match.group(2)
    return subject, ""


def extract_metadata(
    raw: Mapping[str, Any],
    tables: Optional[MappingTables] = None,
    thresholds: MatchThresholds = MATCH_THRESHOLDS,
) -> ExtractedMetadata:
    """
    Extract and normalize paper metadata from upload fields.

    Args:
        raw: Top-level fields of the upload (snake_case or camelCase)
        tables: Mapping tables (defaults to the shipped tables)
        thresholds: Mapping acceptance threshold

    Returns:
        ExtractedMetadata with provider, program, session and title set

    Example:
        >>> meta = extract_metadata({"subject": "Physics - 0625", "paper_code": "0625/42"})
        >>> (meta.subject_code, meta.paper_number, meta.variant_number)
        ('0625', '42', '2')
    """
    tables = tables or default_mapping_tables()

    exam_board = _text(raw, "exam_board", "examBoard")
    qualification = _text(raw, "qualification")
    subject, subject_code = split_subject(_text(raw, "subject"))
    paper_code = _text(raw, "paper_code", "paperCode")
    paper_name = _text(raw, "paper_name", "paperName")

    # Paper code: "0625/42" -> subject code, paper number, variant
    paper_number = ""
    variant_number = ""
    code_parts = paper_code.split("/")
    if len(code_parts) >= 2:
        if not subject_code and code_parts[0].isdigit():
            subject_code = code_parts[0]
        paper_number = code_parts[1]
        if len(paper_number) >= 2:
            variant_number = paper_number[-1]

    if not subject and subject_code in tables.subject_codes:
        subject = tables.subject_codes[subject_code]
        logger.debug(f"Subject taken from code table: {subject_code} -> {subject}")

    raw_session = _text(raw, "exam_session", "examSession")
    exam_session = map_session(raw_session, tables)
    exam_year = _leading_int(_first(raw, "exam_year", "examYear"))

    metadata = ExtractedMetadata(
        exam_board=exam_board,
        qualification=qualification,
        subject=subject,
        subject_code=subject_code,
        paper_code=paper_code,
        paper_name=paper_name,
        paper_number=paper_number,
        variant_number=variant_number,
        paper_type=detect_paper_type(paper_name, tables),
        exam_session=exam_session,
        exam_year=exam_year,
        paper_duration=_text(raw, "paper_duration", "paperDuration", "duration"),
        total_marks=_leading_int(_first(raw, "total_marks", "totalMarks")) or 0,
        provider=map_provider(exam_board, tables, thresholds),
        program=map_program(qualification, tables, thresholds),
        title=f"{subject} - {paper_code}/{exam_session}/{exam_year if exam_year is not None else ''}",
        region=_text(raw, "region", "exam_region"),
    )
    logger.debug(f"Extracted metadata: {metadata.title}")
    return metadata


def validate_metadata(metadata: ExtractedMetadata) -> List[str]:
    """
    List missing required paper fields.

    Args:
        metadata: Extracted metadata

    Returns:
        Messages in display order (empty when complete)
    """
    checks = (
        (metadata.exam_board, "Missing exam board"),
        (metadata.qualification, "Missing qualification"),
        (metadata.subject, "Missing subject"),
        (metadata.paper_code, "Missing paper code"),
        (metadata.exam_year, "Missing exam year"),
        (metadata.exam_session, "Missing exam session"),
        (metadata.total_marks, "Missing total marks"),
    )
    return [message for value, message in checks if not value]
