"""
Module: common.mappings

Purpose:
    Lookup tables that turn free-text paper metadata into canonical
    values: exam board -> provider, qualification -> program, session ->
    abbreviation, paper name -> paper type, subject code -> subject name,
    plus the keywords that mark a question as needing a figure.

    The default tables ship as JSON files in `paper_importer/tables/` and
    are loaded once. Callers can pass their own via
    MappingTables.from_dict() or load_mapping_tables(path); any table a
    custom file leaves out keeps its default.

Key Functions:
    - default_mapping_tables(): Cached tables shipped with the package
    - load_mapping_tables(): Load tables from a JSON file

Dependencies:
    - json (std)
    - functools.lru_cache (std)

Used By:
    - paper_importer.resolver.mapping: Provider/program/session/paper type
    - paper_importer.resolver.extraction: Subject code fallback
    - paper_importer.compliance.rules: Figure keywords
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import ConfigLoadError

logger = logging.getLogger(__name__)

__all__ = [
    "MappingTables",
    "default_mapping_tables",
    "load_mapping_tables",
    "TABLES_DIR",
]


TABLES_DIR = Path(__file__).resolve().parent.parent / "tables"

# Field name -> shipped file name
_TABLE_FILES: Dict[str, str] = {
    "providers": "providers.json",
    "programs": "programs.json",
    "sessions": "sessions.json",
    "paper_types": "paper_types.json",
    "figure_keywords": "figure_keywords.json",
    "subject_codes": "subject_codes.json",
}


@dataclass(frozen=True)
class MappingTables:
    """
    Canonical-value lookup tables.

    Table order matters: provider/program ties keep the first key, session
    containment and paper-type detection take the first hit.

    Attributes:
        providers: Lowercase exam board variant -> provider name
        programs: Lowercase qualification variant -> program name
        sessions: Lowercase session variant -> abbreviation ("M/J")
        paper_types: Paper type -> keywords found in paper names
        figure_keywords: Words in question text that imply a figure
        subject_codes: Syllabus code -> subject name
    """

    providers: Dict[str, str] = field(default_factory=dict)
    programs: Dict[str, str] = field(default_factory=dict)
    sessions: Dict[str, str] = field(default_factory=dict)
    paper_types: Dict[str, List[str]] = field(default_factory=dict)
    figure_keywords: tuple[str, ...] = ()
    subject_codes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: Optional[MappingTables] = None) -> MappingTables:
        """
        Build tables from a dict, keeping `base` for any table not given.

        Args:
            data: Mapping of table name -> table
            base: Tables to fall back on (defaults to the shipped tables)

        Returns:
            MappingTables instance

        Raises:
            ValueError: If a table has the wrong container type
        """
        base = base if base is not None else default_mapping_tables()
        changes: dict[str, Any] = {}

        for name in ("providers", "programs", "sessions", "subject_codes"):
            if name in data:
                table = data[name]
                if not isinstance(table, dict):
                    raise ValueError(f"Mapping table '{name}' must be an object")
                changes[name] = {str(k).lower() if name != "subject_codes" else str(k): str(v)
                                 for k, v in table.items()}

        if "paper_types" in data:
            table = data["paper_types"]
            if not isinstance(table, dict):
                raise ValueError("Mapping table 'paper_types' must be an object")
            changes["paper_types"] = {
                str(k): [str(word).lower() for word in v] for k, v in table.items()
            }

        if "figure_keywords" in data:
            words = data["figure_keywords"]
            if not isinstance(words, list):
                raise ValueError("Mapping table 'figure_keywords' must be a list")
            changes["figure_keywords"] = tuple(str(w).lower() for w in words)

        unknown = set(data) - set(_TABLE_FILES)
        if unknown:
            logger.warning(f"Ignoring unknown mapping tables: {sorted(unknown)}")

        return replace(base, **changes)

    def to_dict(self) -> dict:
        return {
            "providers": dict(self.providers),
            "programs": dict(self.programs),
            "sessions": dict(self.sessions),
            "paper_types": {k: list(v) for k, v in self.paper_types.items()},
            "figure_keywords": list(self.figure_keywords),
            "subject_codes": dict(self.subject_codes),
        }


@lru_cache(maxsize=None)
def default_mapping_tables() -> MappingTables:
    """
    Load the tables shipped in `paper_importer/tables/`.

    Returns:
        Cached MappingTables instance
    """
    raw: dict[str, Any] = {}
    for name, filename in _TABLE_FILES.items():
        path = TABLES_DIR / filename
        with open(path, "r", encoding="utf-8") as f:
            raw[name] = json.load(f)
    logger.debug(f"Loaded default mapping tables from {TABLES_DIR}")
    return MappingTables.from_dict(raw, base=MappingTables())


def load_mapping_tables(path: Path) -> MappingTables:
    """
    Load custom tables from a single JSON file.

    The file holds an object keyed by table name (providers, programs,
    sessions, paper_types, figure_keywords, subject_codes). Tables not
    present keep their shipped defaults.

    Args:
        path: Path to the JSON file

    Returns:
        MappingTables instance

    Raises:
        ConfigLoadError: If the file cannot be read or is malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigLoadError(f"Could not read mapping tables {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Mapping tables file must contain a JSON object: {path}")
    try:
        tables = MappingTables.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"Invalid mapping tables in {path}: {e}") from e

    logger.info(f"Loaded mapping tables from {path.name}")
    return tables
