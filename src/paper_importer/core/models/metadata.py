"""
Module: metadata

Purpose:
    Provides ExtractedMetadata - the flat paper-level record pulled from an
    uploaded JSON file (exam board, qualification, subject, paper code,
    session, year...). Produced once per upload; a reviewer edit creates a
    new instance via with_changes().

Dependencies:
    - dataclasses (std)

Used By:
    - resolver.extraction
    - resolver.matcher
    - cli
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class ExtractedMetadata:
    """
    Paper metadata extracted from an uploaded file (immutable).

    Attributes:
        exam_board: Raw exam board text, e.g. "Cambridge"
        qualification: Raw qualification text, e.g. "IGCSE"
        subject: Subject name with any trailing code removed
        subject_code: Syllabus code like "0625" ("" when unknown)
        paper_code: Paper code like "0625/42"
        paper_name: Paper name like "Paper 4 Theory (Extended)"
        paper_number: Paper number from the paper code, e.g. "42"
        variant_number: Variant digit, e.g. "2"
        paper_type: Detected paper type, e.g. "Theory"
        exam_session: Session, abbreviated when recognised ("M/J")
        exam_year: Exam year, None when missing
        paper_duration: Duration text, e.g. "1 hour 15 minutes"
        total_marks: Declared total marks (0 when missing)
        provider: Canonical provider name mapped from exam_board
        program: Canonical program name mapped from qualification
        title: Derived display title
        region: Region text when present in the upload
    """

    exam_board: str = ""
    qualification: str = ""
    subject: str = ""
    subject_code: str = ""
    paper_code: str = ""
    paper_name: str = ""
    paper_number: str = ""
    variant_number: str = ""
    paper_type: str = ""
    exam_session: str = ""
    exam_year: Optional[int] = None
    paper_duration: str = ""
    total_marks: int = 0
    provider: str = ""
    program: str = ""
    title: str = ""
    region: str = ""

    def with_changes(self, **changes: Any) -> ExtractedMetadata:
        """Return a copy with reviewer edits applied."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return asdict(self)
