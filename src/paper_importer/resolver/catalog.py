"""
Module: resolver.catalog

Purpose:
    Loads the data-structure catalog export (JSON) into CatalogEntry rows.
    Only rows with status "active" are returned; malformed rows are
    skipped with a warning so one bad export row does not block matching.

Key Functions:
    - load_catalog(): Read and parse a catalog export file
    - parse_catalog(): Parse already-loaded catalog JSON

Dependencies:
    - paper_importer.core.schemas: validate_catalog()

Used By:
    - paper_importer.cli
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from ..core.models.catalog import CatalogEntry
from ..core.schemas.validator import ValidationError, validate_catalog
from ..errors import CatalogLoadError

logger = logging.getLogger(__name__)


def parse_catalog(data: Any, *, strict: bool = False) -> List[CatalogEntry]:
    """
    Parse catalog JSON into active entries.

    Args:
        data: A list of rows, or an object with a "data_structures" list
        strict: Also run full JSON Schema validation

    Returns:
        Active CatalogEntry rows in catalog order

    Raises:
        ValidationError: If the container shape is wrong
    """
    validate_catalog(data, strict=strict)
    rows = data.get("data_structures") if isinstance(data, dict) else data

    entries: List[CatalogEntry] = []
    for i, row in enumerate(rows):
        try:
            entry = CatalogEntry.from_dict(row)
        except ValueError as e:
            logger.warning(f"Skipping malformed catalog row {i}: {e}")
            continue
        if entry.status != "active":
            logger.debug(f"Skipping {entry.status} data structure {entry.id}")
            continue
        entries.append(entry)
    return entries


def load_catalog(path: Path, *, strict: bool = False) -> List[CatalogEntry]:
    """
    Load the catalog export from disk.

    Args:
        path: Path to the catalog JSON file
        strict: Also run full JSON Schema validation

    Returns:
        Active CatalogEntry rows

    Raises:
        CatalogLoadError: If the file cannot be read or has the wrong shape
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Catalog file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Could not read catalog {path}: {e}") from e

    try:
        entries = parse_catalog(data, strict=strict)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid catalog {path}: {e}") from e

    logger.info(f"Loaded {len(entries)} active data structures from {path.name}")
    return entries
