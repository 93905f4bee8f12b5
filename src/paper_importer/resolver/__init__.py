"""
Entity Resolver

Resolves free-text paper metadata to catalog data structures.

Pipeline: raw upload fields -> extract_metadata() -> validate_metadata()
-> match_catalog() against active CatalogEntry rows.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..common.mappings import MappingTables
from ..common.thresholds import MATCH_THRESHOLDS, MatchThresholds
from ..core.models.catalog import CatalogEntry
from .catalog import load_catalog, parse_catalog
from .extraction import extract_metadata, split_subject, validate_metadata
from .mapping import detect_paper_type, map_program, map_provider, map_session, map_with_dictionary
from .matcher import match_catalog, score_entry
from .models import MatchResult, Resolution

logger = logging.getLogger(__name__)


def resolve_paper(
    raw: Mapping[str, Any],
    catalog: Optional[Iterable[CatalogEntry]] = None,
    *,
    tables: Optional[MappingTables] = None,
    thresholds: MatchThresholds = MATCH_THRESHOLDS,
) -> Resolution:
    """
    Extract metadata from upload fields and match it to the catalog.

    Args:
        raw: Top-level fields of the upload
        catalog: Active catalog entries; None skips matching
        tables: Mapping tables (defaults to the shipped tables)
        thresholds: Resolver thresholds

    Returns:
        Resolution; match is None when no catalog was given
    """
    metadata = extract_metadata(raw, tables, thresholds)
    errors = tuple(validate_metadata(metadata))
    if errors:
        logger.info(f"Metadata incomplete: {', '.join(errors)}")

    match = None
    if catalog is not None:
        match = match_catalog(metadata, catalog, thresholds)
    return Resolution(metadata=metadata, errors=errors, match=match)


__all__ = [
    "MatchResult",
    "Resolution",
    "detect_paper_type",
    "extract_metadata",
    "load_catalog",
    "map_program",
    "map_provider",
    "map_session",
    "map_with_dictionary",
    "match_catalog",
    "parse_catalog",
    "resolve_paper",
    "score_entry",
    "split_subject",
    "validate_metadata",
]
