"""
Module: common.file_locking

Purpose:
    Cross-platform locked JSON writes for report output. Uses portalocker
    so two CLI runs writing the same report path never interleave.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_write_json: Replace a JSON file's contents under an exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - compliance.report: write_report()
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Open a report file with a portalocker lock held.

    The file is created first if needed, so callers open it in r+ and
    decide themselves when to truncate.

    Args:
        path: Report path; missing parent directories are created.
        mode: Open mode, usually 'r+' for rewrites.
        lock_type: portalocker.LOCK_EX to write, LOCK_SH to read.

    Yields:
        The locked file handle.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Open without truncating so the lock is held before content changes
    if not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_write_json(path: Path, data: Any) -> None:
    """
    Write JSON to path with an exclusive lock held for the whole write.

    Args:
        path: Output path (parent directories are created).
        data: JSON-serializable data.

    Example:
        >>> locked_write_json(Path("report.json"), {"summary": {}})
    """
    path = Path(path)
    with locked_file(path, 'r+', portalocker.LOCK_EX) as f:
        f.seek(0)
        f.truncate()
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write('\n')

    logger.debug(f"Wrote {path.name} under lock")
