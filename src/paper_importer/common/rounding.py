"""Half-up rounding for percentages shown to reviewers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positives.

    Python's round() sends halves to the even neighbour (round(62.5) == 62);
    reviewer-facing percentages round 62.5 up to 63.

    Example:
        >>> round_half_up(62.5)
        63
        >>> round_half_up(66.666)
        67
    """
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
