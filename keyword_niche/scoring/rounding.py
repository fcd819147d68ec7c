"""Keyword Niche - Half-up rounding for reported scores."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 1) -> float:
    """Round *value* with halves going toward positive infinity (0.25 -> 0.3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
