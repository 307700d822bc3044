"""Floating point comparison helpers."""
from __future__ import annotations

import math

DOUBLE_RELATIVE_ERROR = 1e-10


def double_equal(a: float, b: float, rel: float = DOUBLE_RELATIVE_ERROR) -> bool:
    """
    True if ``a`` and ``b`` agree to a relative difference below ``rel``.

    Identical values are equal. If exactly one of them is zero no relative
    difference exists and the values compare unequal.
    """
    diff = math.fabs(a - b)
    if diff == 0.0:
        return True
    if a == 0.0 or b == 0.0:
        return False
    smaller = min(math.fabs(a), math.fabs(b))
    return diff / smaller < rel


__all__ = ["DOUBLE_RELATIVE_ERROR", "double_equal"]
