"""
Module: compliance.report

Purpose:
    Builds and writes the exported compliance report. The report keeps
    exactly three top-level keys - summary, details, timestamp - which
    downstream consumers depend on.

Key Functions:
    - build_report(): Report dict from results
    - write_report(): Write the report JSON under an exclusive file lock

Dependencies:
    - paper_importer.common.file_locking: portalocker-backed writes

Used By:
    - cli: check --report
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..common.file_locking import locked_write_json
from ..errors import ImporterError
from .models import ComplianceResult, ComplianceSummary
from .summary import summarize

logger = logging.getLogger(__name__)


def build_report(
    results: Mapping[str, ComplianceResult],
    summary: Optional[ComplianceSummary] = None,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the exported report.

    Args:
        results: Results keyed by question number
        summary: Precomputed summary (computed from results when None)
        timestamp: Report time (now, UTC, when None)

    Returns:
        {"summary": {...}, "details": {number: {...}}, "timestamp": ISO-8601}
    """
    summary = summary or summarize(results)
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "summary": summary.to_dict(),
        "details": {key: result.to_dict() for key, result in results.items()},
        "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
    }


def write_report(path: Path, report: Dict[str, Any]) -> Path:
    """
    Write a report to disk.

    Args:
        path: Output JSON path (parents are created)
        report: Report from build_report()

    Returns:
        The written path

    Raises:
        ImporterError: If the file cannot be written
    """
    path = Path(path)
    try:
        locked_write_json(path, report)
    except OSError as e:
        raise ImporterError(f"Could not write report {path}: {e}") from e
    logger.info(f"Compliance report written to {path}")
    return path
