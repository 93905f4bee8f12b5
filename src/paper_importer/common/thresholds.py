"""Centralized threshold configuration for metadata matching.

Every cut-off and weight used when mapping free-text metadata and scoring
catalog rows lives here, so tuning happens in one place.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchThresholds:
    """Thresholds and weights for dictionary mapping and catalog scoring."""

    # Dictionary-assisted mapping (provider / program)
    mapping_accept: float = 0.6  # Best key similarity must exceed this

    # Catalog scoring weights
    subject_code_weight: float = 0.4  # Exact subject code match
    subject_name_weight: float = 0.3  # Multiplied by subject name similarity
    provider_weight: float = 0.3  # Multiplied by provider similarity
    program_weight: float = 0.3  # Multiplied by program similarity

    # Sub-score gates
    subject_name_min: float = 0.7  # Subject name similarity must exceed this
    provider_min: float = 0.8  # Provider similarity must exceed this
    program_min: float = 0.8  # Program similarity must exceed this

    # Decision rule
    accept_score: float = 0.5  # Best entry score must exceed this
    confident_score: float = 0.9  # Below this, suggestions are emitted
    weak_score: float = 0.7  # Below this, suggest a new data structure


# Global default instance
MATCH_THRESHOLDS = MatchThresholds()
