"""Numerical integration of sampled functions."""
from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from fastrt_core.exceptions import FatalIntegrationError, LimitsOutOfRangeError, TooFewDataPointsError
from fastrt_core.numerics.spline import linear_coeffc, spline_coeffc
from fastrt_core.types import ArrayLike, NDArrayF, PiecewiseCubic, as_float_array, as_series_arrays
from fastrt_core.utils.floats import double_equal

logger = logging.getLogger(__name__)

__all__ = [
    "trapezoid_weights",
    "integrate",
    "integrate_spline",
    "integrate_linear",
    "integrate_piecewise",
]


def trapezoid_weights(x: NDArrayF) -> NDArrayF:
    """Trapezoidal integration weights for a sorted 1-D grid: sum(w * f) ~ int f dx."""
    x = as_float_array(x, "x")
    w = np.zeros_like(x)
    if x.size < 2:
        return w
    dx = np.diff(x)
    w[0] = 0.5 * dx[0]
    w[-1] = 0.5 * dx[-1]
    if x.size > 2:
        w[1:-1] = 0.5 * (dx[:-1] + dx[1:])
    return w


def integrate(x: ArrayLike, y: ArrayLike) -> float:
    """
    Trapezoid rule over consecutive samples.

    No checks are made: x is assumed ascending. Fewer than two samples give 0.
    """
    xa, ya = as_series_arrays(x, y)
    if xa.size < 2:
        return 0.0
    return float(np.sum(0.5 * (ya[:-1] + ya[1:]) * np.diff(xa)))


def _segment_integral(coeffs: tuple[float, float, float, float], lo: float, hi: float, x_left: float) -> float:
    """Integral of one cubic piece between lo and hi, both inside the piece."""
    if double_equal(lo, hi):
        return 0.0
    a0, a1, a2, a3 = coeffs

    def antiderivative(t: float) -> float:
        dx = t - x_left
        return dx * (a0 + dx * (a1 / 2.0 + dx * (a2 / 3.0 + dx * a3 / 4.0)))

    return antiderivative(hi) - antiderivative(lo)


def _integrate_bounded(
    x: NDArrayF, fit: Callable[[], PiecewiseCubic], a: float, b: float
) -> float:
    """Shared control flow of the bounded integrators; ``fit`` runs only when needed."""
    if double_equal(a, b):
        return 0.0

    sign = 1.0
    if b < a:
        a, b = b, a
        sign = -1.0

    n = x.size
    if n < 2:
        raise TooFewDataPointsError("integration needs at least two points", 2, n)
    if a > x[-1] or b < x[0]:
        raise LimitsOutOfRangeError(f"integration limits [{a}, {b}] outside [{x[0]}, {x[-1]}]")

    # i1: first knot at or right of a
    if double_equal(a, x[0]):
        i1 = 1
    elif double_equal(a, x[-1]):
        return 0.0
    elif a < x[0]:
        raise LimitsOutOfRangeError(f"lower limit {a} left of {x[0]}")
    else:
        i1 = int(np.searchsorted(x, a, side="left"))

    # i2: last knot strictly left of b
    if double_equal(b, x[-1]):
        i2 = n - 2
    elif double_equal(b, x[0]):
        return 0.0
    elif b > x[-1]:
        raise LimitsOutOfRangeError(f"upper limit {b} right of {x[-1]}")
    else:
        i2 = int(np.searchsorted(x, b, side="left")) - 1

    coeffs = fit()

    if i2 < i1 - 1:
        raise FatalIntegrationError(f"inconsistent interval indices i1={i1}, i2={i2}")

    if i2 == i1 - 1:
        total = _segment_integral(coeffs.segment(i2), a, b, x[i2])
    else:
        total = _segment_integral(coeffs.segment(i1 - 1), a, x[i1], x[i1 - 1])
        for i in range(i1, i2):
            total += _segment_integral(coeffs.segment(i), x[i], x[i + 1], x[i])
        total += _segment_integral(coeffs.segment(i2), x[i2], b, x[i2])

    logger.debug("integrated over [%g, %g] using intervals %d..%d", a, b, i1 - 1, i2)
    return sign * total


def integrate_spline(x: ArrayLike, y: ArrayLike, a: float, b: float) -> float:
    """
    Integral of the natural cubic spline through (x, y) from ``a`` to ``b``.

    Returns 0 for a zero-width interval without fitting; ``b < a`` gives the
    negated integral. Limits strictly outside [x[0], x[-1]] raise
    LimitsOutOfRangeError.
    """
    xa, ya = as_series_arrays(x, y)
    return _integrate_bounded(xa, lambda: spline_coeffc(xa, ya), a, b)


def integrate_linear(x: ArrayLike, y: ArrayLike, a: float, b: float) -> float:
    """As :func:`integrate_spline`, with piecewise linear interpolation."""
    xa, ya = as_series_arrays(x, y)
    return _integrate_bounded(xa, lambda: linear_coeffc(xa, ya), a, b)


def integrate_piecewise(coeffs: PiecewiseCubic, a: float, b: float) -> float:
    """Integral of an already fitted curve from ``a`` to ``b``."""
    return _integrate_bounded(np.asarray(coeffs.x), lambda: coeffs, a, b)
