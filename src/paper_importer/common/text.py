"""
Module: common.text

Purpose:
    Fuzzy string comparison for free-text paper metadata. Exam boards and
    qualifications arrive as "Cambridge", "CIE", "Cambridge International
    (CIE)" and so on; these helpers reduce them to comparable keys and
    score how alike two keys are.

Key Functions:
    - normalize_key(): Lowercase, trim and strip non-alphanumerics
    - levenshtein(): Edit distance between two strings
    - similarity(): Score in [0, 1] with an equality/containment shortcut

Dependencies:
    - re (std)

Used By:
    - paper_importer.resolver.mapping: Dictionary-assisted mapping
    - paper_importer.resolver.matcher: Catalog scoring
"""

from __future__ import annotations

import re
from typing import Optional

__all__ = ["normalize_key", "levenshtein", "similarity", "CONTAINMENT_SCORE"]


_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

# Score when one normalized key contains the other. Fixed, not proportional
# to length, so "cie" inside "cambridgeinternationalcie" also scores 0.8.
CONTAINMENT_SCORE = 0.8


def normalize_key(value: Optional[str]) -> str:
    """
    Reduce a label to a comparison key.

    Args:
        value: Raw label (None allowed)

    Returns:
        Lowercase key with every character outside [a-z0-9] removed

    Example:
        >>> normalize_key("  Cambridge International (CIE) ")
        'cambridgeinternationalcie'
        >>> normalize_key("A-Level")
        'alevel'
    """
    if not value:
        return ""
    return _NON_ALNUM_RE.sub("", str(value).lower().strip())


def levenshtein(a: str, b: str) -> int:
    """
    Edit distance with unit cost insert/delete/substitute.

    Example:
        >>> levenshtein("kitten", "sitting")
        3
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (char_a != char_b),
            ))
        previous = current
    return previous[-1]


def similarity(a: Optional[str], b: Optional[str]) -> float:
    """
    Score how alike two labels are, after normalization.

    Rules, in order:
        1. Equal keys -> 1.0 (two empty keys count as equal)
        2. Exactly one key empty -> 0.0
        3. One key contains the other -> CONTAINMENT_SCORE
        4. Otherwise (longer - distance) / longer, never below 0

    The result is symmetric in a and b.

    Example:
        >>> similarity("Cambridge", "cambridge ")
        1.0
        >>> similarity("cie", "Cambridge International (CIE)")
        0.8
    """
    key_a = normalize_key(a)
    key_b = normalize_key(b)

    if key_a == key_b:
        return 1.0
    if not key_a or not key_b:
        return 0.0
    if key_a in key_b or key_b in key_a:
        return CONTAINMENT_SCORE

    longer = max(len(key_a), len(key_b))
    distance = levenshtein(key_a, key_b)
    return max(0.0, (longer - distance) / longer)
