"""
Small numeric helpers shared by the engines.
"""

from __future__ import annotations

import math


def round_half_up(x: float) -> int:
    """Rounds .5 towards +inf (Python's round() goes to even)."""
    return math.floor(x + 0.5)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))
