"""Shared helpers: text matching, mapping tables, thresholds and file locking."""

from .mappings import MappingTables, default_mapping_tables, load_mapping_tables
from .text import levenshtein, normalize_key, similarity
from .rounding import round_half_up
from .thresholds import MATCH_THRESHOLDS, MatchThresholds

__all__ = [
    "MappingTables",
    "default_mapping_tables",
    "load_mapping_tables",
    "levenshtein",
    "normalize_key",
    "similarity",
    "round_half_up",
    "MATCH_THRESHOLDS",
    "MatchThresholds",
]
