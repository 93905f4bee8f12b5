"""
Module: resolver.models

Purpose:
    Result types of the entity resolver: MatchResult (the catalog match
    decision) and Resolution (metadata + completeness messages + match).

Used By:
    - resolver.matcher
    - resolver (resolve_paper)
    - cli
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.models.metadata import ExtractedMetadata

NO_MATCH_SUGGESTION = "No matching data structure found. Consider creating a new one."


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of scoring an extracted paper against the catalog.

    Attributes:
        data_structure_id: Id of the accepted entry, None on no-match
        region_id: Region of the accepted entry
        program_id: Program of the accepted entry
        provider_id: Provider of the accepted entry
        subject_id: Subject of the accepted entry
        confidence: min(score, 1.0); 0 on no-match
        matched_on: Human-readable sub-scores that fired
        suggestions: Follow-up hints for the reviewer
    """

    data_structure_id: Optional[str] = None
    region_id: Optional[str] = None
    program_id: Optional[str] = None
    provider_id: Optional[str] = None
    subject_id: Optional[str] = None
    confidence: float = 0.0
    matched_on: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()

    @property
    def is_match(self) -> bool:
        return self.data_structure_id is not None

    @classmethod
    def no_match(cls) -> MatchResult:
        return cls(suggestions=(NO_MATCH_SUGGESTION,))

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys the import screen expects."""
        return {
            "dataStructureId": self.data_structure_id,
            "regionId": self.region_id,
            "programId": self.program_id,
            "providerId": self.provider_id,
            "subjectId": self.subject_id,
            "confidence": self.confidence,
            "matchedOn": list(self.matched_on),
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class Resolution:
    """Extracted metadata, its completeness messages and the catalog match."""

    metadata: ExtractedMetadata
    errors: Tuple[str, ...] = ()
    match: Optional[MatchResult] = None

    def to_dict(self) -> dict:
        return {
            "metadata": self.metadata.to_dict(),
            "errors": list(self.errors),
            "match": self.match.to_dict() if self.match is not None else None,
        }
