"""
Interpolating and approximating natural cubic splines.

Every fit returns a :class:`~fastrt_core.types.PiecewiseCubic`; evaluation never
extrapolates. The same coefficient layout serves the degenerate linear case, so
linear and cubic interpolation share evaluation, resampling and integration.

- ``spline_coeffc``  : natural cubic interpolating spline (tridiagonal system).
- ``linear_coeffc``  : piecewise linear interpolation in spline layout.
- ``appspl_coeffc``  : weighted approximating (smoothing) natural spline
                       (pentadiagonal system, Engeln-Muellges / Reinsch).
- ``spline`` / ``appspl`` / ``linear_eqd`` : resampling onto an equidistant grid.
"""
from __future__ import annotations

import logging
import math
from typing import Callable

import numpy as np

from fastrt_core.exceptions import (
    DataNotSortedError,
    NegativeWeightingFactorsError,
    NoExtrapolationError,
    NoSplinedValuesError,
    NotAscendingError,
    SingularMatrixError,
    SplineNotPossibleError,
    TooFewDataPointsError,
)
from fastrt_core.numerics.equation import solve_five_ms, solve_three_ms
from fastrt_core.types import ArrayLike, NDArrayF, PiecewiseCubic, SampleSeries, as_float_array, as_series_arrays

logger = logging.getLogger(__name__)

__all__ = [
    "spline_coeffc",
    "linear_coeffc",
    "appspl_coeffc",
    "calc_splined_value",
    "calc_splined_values",
    "spline",
    "appspl",
    "linear_eqd",
    "equidistant_grid",
    "APPSPL_MIN_POINTS",
]

APPSPL_MIN_POINTS = 6
# slack added when counting output points so that a grid point landing on the
# last abscissa up to rounding is kept
_GRID_EPS = 1e-8


def _check_ascending(x: NDArrayF) -> NDArrayF:
    h = np.diff(x)
    bad = np.flatnonzero(~(h > 0.0))
    if bad.size:
        i = int(bad[0])
        logger.debug("x not ascending at %d: %g, %g", i, x[i], x[i + 1])
        raise NotAscendingError("x values must be strictly ascending", index=i)
    return h


def _linear_segments(x: NDArrayF, y: NDArrayF) -> PiecewiseCubic:
    n = x.size
    a0 = y.copy()
    a1 = np.zeros(n, dtype=np.float64)
    a1[:-1] = np.diff(y) / np.diff(x)
    return PiecewiseCubic(x=x, a0=a0, a1=a1, a2=np.zeros(n), a3=np.zeros(n))


def _from_half_curvatures(x: NDArrayF, a0: NDArrayF, c: NDArrayF) -> PiecewiseCubic:
    """Build interval coefficients from knot values a0 and half second derivatives c."""
    n = x.size
    h = np.diff(x)
    a1 = np.zeros(n, dtype=np.float64)
    a3 = np.zeros(n, dtype=np.float64)
    a1[:-1] = np.diff(a0) / h - h / 3.0 * (c[1:] + 2.0 * c[:-1])
    a3[:-1] = (c[1:] - c[:-1]) / (3.0 * h)
    a2 = c.copy()
    a2[-1] = 0.0
    return PiecewiseCubic(x=x, a0=a0, a1=a1, a2=a2, a3=a3)


# ---------------------------------------------------------------------------
# Coefficients
# ---------------------------------------------------------------------------

def linear_coeffc(x: ArrayLike, y: ArrayLike) -> PiecewiseCubic:
    """Coefficients of piecewise linear interpolation (a2 = a3 = 0)."""
    xa, ya = as_series_arrays(x, y)
    if xa.size < 2:
        raise TooFewDataPointsError("linear interpolation needs at least two points", 2, xa.size)
    _check_ascending(xa)
    return _linear_segments(xa, ya)


def spline_coeffc(x: ArrayLike, y: ArrayLike) -> PiecewiseCubic:
    """
    Coefficients of the natural cubic spline through (x, y).

    Two points give the straight line through them. Otherwise the half second
    derivatives c_1..c_{n-2} solve the tridiagonal system

        h_{i-1} c_{i-1} + 2 (h_{i-1} + h_i) c_i + h_i c_{i+1}
            = 3 (y_{i+1} - y_i) / h_i - 3 (y_i - y_{i-1}) / h_{i-1}

    with c_0 = c_{n-1} = 0.
    """
    xa, ya = as_series_arrays(x, y)
    n = xa.size
    if n < 2:
        raise TooFewDataPointsError("spline needs at least two points", 2, n)
    h = _check_ascending(xa)

    if n == 2:
        return _linear_segments(xa, ya)

    band = np.zeros((n - 2, 3), dtype=np.float64)
    band[1:, 0] = h[1:-1]
    band[:, 1] = 2.0 * (h[:-1] + h[1:])
    band[:-1, 2] = h[1:-1]
    slopes = np.diff(ya) / h
    rhs = 3.0 * (slopes[1:] - slopes[:-1])

    try:
        interior = solve_three_ms(band, rhs)
    except SingularMatrixError as err:
        raise SplineNotPossibleError(f"natural spline system is singular: {err.message}") from err

    c = np.zeros(n, dtype=np.float64)
    c[1:-1] = interior
    logger.debug("natural spline fitted on %d points", n)
    return _from_half_curvatures(xa, ya, c)


def _appspl_full_support(x: NDArrayF, y: NDArrayF, w: NDArrayF) -> PiecewiseCubic:
    """Approximating spline for strictly positive weights."""
    n = x.size - 1           # number of intervals
    h1 = np.diff(x)
    h2 = 1.0 / h1
    b = 6.0 / w
    H = h2[:-1] + h2[1:]     # [n-1]
    d = np.zeros(n + 1, dtype=np.float64)
    d[1:n] = H

    slopes = np.diff(y) * h2
    rhs = 3.0 * (slopes[1:] - slopes[:-1])

    # rows i = 0..n-2 belong to the interior knots 1..n-1
    mat = np.zeros((n - 1, 5), dtype=np.float64)
    mat[:, 2] = (
        2.0 * (h1[:-1] + h1[1:])
        + b[:-2] * h2[:-1] ** 2
        + b[1:-1] * H ** 2
        + b[2:] * h2[1:] ** 2
    )
    upper = h1[1:-1] - b[1:-2] * h2[1:-1] * H[:-1] - b[2:-1] * h2[1:-1] * H[1:]
    mat[:-1, 3] = upper
    mat[1:, 1] = upper
    outer = b[2:-2] * h2[1:-2] * h2[2:-1]
    mat[:-2, 4] = outer
    mat[2:, 0] = outer

    try:
        interior = solve_five_ms(mat, rhs)
    except SingularMatrixError as err:
        raise SplineNotPossibleError(f"approximating spline system is singular: {err.message}") from err

    c = np.zeros(n + 1, dtype=np.float64)
    c[1:n] = interior

    a = np.empty(n + 1, dtype=np.float64)
    a[0] = y[0] + b[0] / 3.0 * h2[0] * (c[0] - c[1])
    a[1:n] = y[1:n] - b[1:n] / 3.0 * (c[:n - 1] * h2[:n - 1] - d[1:n] * c[1:n] + c[2:] * h2[1:])
    a[n] = y[n] - b[n] / 3.0 * h2[n - 1] * (c[n - 1] - c[n])
    return _from_half_curvatures(x, a, c)


def _reexpand(pc: PiecewiseCubic, x: NDArrayF) -> PiecewiseCubic:
    """
    Express the curve ``pc`` on the knot set ``x`` (a superset of pc.x).

    Inside pc's range the cubic of the enclosing interval is re-centred on the
    new knot; outside it the curve continues linearly (natural boundary).
    """
    n = x.size
    xs = pc.x
    m = xs.size
    h_last = xs[-1] - xs[-2]
    end_slope = pc.a1[m - 2] + 2.0 * pc.a2[m - 2] * h_last + 3.0 * pc.a3[m - 2] * h_last ** 2

    a0 = np.empty(n, dtype=np.float64)
    a1 = np.zeros(n, dtype=np.float64)
    a2 = np.zeros(n, dtype=np.float64)
    a3 = np.zeros(n, dtype=np.float64)

    left = x < xs[0]
    right = x >= xs[-1]
    inside = ~(left | right)

    a0[left] = pc.a0[0] + pc.a1[0] * (x[left] - xs[0])
    a1[left] = pc.a1[0]
    a0[right] = pc.a0[m - 1] + end_slope * (x[right] - xs[-1])
    a1[right] = end_slope

    idx = np.clip(np.searchsorted(xs, x[inside], side="right") - 1, 0, m - 2)
    dx = x[inside] - xs[idx]
    c0, c1, c2, c3 = pc.a0[idx], pc.a1[idx], pc.a2[idx], pc.a3[idx]
    a0[inside] = c0 + dx * (c1 + dx * (c2 + dx * c3))
    a1[inside] = c1 + dx * (2.0 * c2 + 3.0 * c3 * dx)
    a2[inside] = c2 + 3.0 * c3 * dx
    a3[inside] = c3

    a1[-1] = a2[-1] = a3[-1] = 0.0
    return PiecewiseCubic(x=x, a0=a0, a1=a1, a2=a2, a3=a3)


def appspl_coeffc(x: ArrayLike, y: ArrayLike, w: ArrayLike) -> PiecewiseCubic:
    """
    Coefficients of the weighted approximating natural cubic spline.

    Minimises sum_i w_i (y_i - s(x_i))**2 + const * int s''(x)**2 dx; a larger
    weight pulls the curve closer to its point. Points with zero weight do not
    take part in the fit but stay knots of the returned curve.
    """
    xa, ya = as_series_arrays(x, y)
    wa = as_float_array(w, "w")
    if wa.size != xa.size:
        raise ValueError(f"w must have the same length as x ({wa.size} != {xa.size})")
    n = xa.size
    if n < APPSPL_MIN_POINTS:
        raise TooFewDataPointsError("approximating spline needs more points", APPSPL_MIN_POINTS, n)
    if np.any(np.diff(xa) <= 0.0):
        raise DataNotSortedError("x values must be sorted in strictly ascending order")
    if np.any(wa < 0.0):
        raise NegativeWeightingFactorsError("weighting factors must not be negative")

    active = wa > 0.0
    if active.all():
        logger.debug("approximating spline fitted on %d points", n)
        return _appspl_full_support(xa, ya, wa)

    n_active = int(active.sum())
    if n_active < APPSPL_MIN_POINTS:
        raise TooFewDataPointsError(
            "approximating spline needs more positively weighted points", APPSPL_MIN_POINTS, n_active
        )
    logger.debug("approximating spline fitted on %d of %d points (zero weights excluded)", n_active, n)
    reduced = _appspl_full_support(xa[active], ya[active], wa[active])
    return _reexpand(reduced, xa)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def _evaluate(pc: PiecewiseCubic, xs: NDArrayF) -> NDArrayF:
    x = pc.x
    n = x.size
    idx = np.clip(np.searchsorted(x, xs, side="right") - 1, 0, n - 2)
    dx = xs - x[idx]
    values = pc.a0[idx] + dx * (pc.a1[idx] + dx * (pc.a2[idx] + dx * pc.a3[idx]))
    return np.where(xs == x[-1], pc.a0[-1], values)


def calc_splined_value(xnew: float, coeffs: PiecewiseCubic) -> float:
    """Evaluate the fitted curve at ``xnew``; raises NoExtrapolationError outside the knots."""
    lo, hi = coeffs.bounds
    if xnew < lo or xnew > hi:
        raise NoExtrapolationError(f"{xnew} outside [{lo}, {hi}]", value=xnew)
    return float(_evaluate(coeffs, np.array([xnew], dtype=np.float64))[0])


def calc_splined_values(xs: ArrayLike, coeffs: PiecewiseCubic) -> NDArrayF:
    """Vectorised :func:`calc_splined_value`."""
    pts = as_float_array(xs, "xs")
    lo, hi = coeffs.bounds
    outside = np.flatnonzero((pts < lo) | (pts > hi))
    if outside.size:
        bad = float(pts[outside[0]])
        raise NoExtrapolationError(f"{bad} outside [{lo}, {hi}]", value=bad)
    return _evaluate(coeffs, pts)


# ---------------------------------------------------------------------------
# Equidistant resampling
# ---------------------------------------------------------------------------

def equidistant_grid(x: NDArrayF, start: float, step: float) -> NDArrayF:
    """
    Output abscissas start, start+step, ... up to x[-1].

    A start left of x[0] is moved up to the smallest multiple of ``step`` that
    is not below x[0].
    """
    if not step > 0.0:
        raise ValueError(f"step must be positive, got {step}")
    first = start if start >= x[0] else math.ceil(x[0] / step) * step
    count = int((x[-1] - first) / step + 1.0 + _GRID_EPS)
    if count <= 0:
        raise NoSplinedValuesError(f"no output points between {first} and {x[-1]}")
    return first + np.arange(count, dtype=np.float64) * step


def _resample(
    fit: Callable[[], PiecewiseCubic], x: NDArrayF, start: float, step: float
) -> SampleSeries:
    grid = equidistant_grid(x, start, step)
    coeffs = fit()
    logger.debug("resampling %d points onto %d equidistant points (step %g)", x.size, grid.size, step)
    return SampleSeries(x=grid, y=_evaluate(coeffs, grid))


def spline(x: ArrayLike, y: ArrayLike, start: float, step: float) -> SampleSeries:
    """Natural cubic spline interpolation onto an equidistant grid."""
    xa, ya = as_series_arrays(x, y)
    if xa.size < 2:
        raise TooFewDataPointsError("spline needs at least two points", 2, xa.size)
    return _resample(lambda: spline_coeffc(xa, ya), xa, start, step)


def appspl(x: ArrayLike, y: ArrayLike, w: ArrayLike, start: float, step: float) -> SampleSeries:
    """Approximating spline evaluated on an equidistant grid."""
    xa, ya = as_series_arrays(x, y)
    if xa.size < 2:
        raise TooFewDataPointsError("approximating spline needs more points", APPSPL_MIN_POINTS, xa.size)
    return _resample(lambda: appspl_coeffc(xa, ya, w), xa, start, step)


def linear_eqd(x: ArrayLike, y: ArrayLike, start: float, step: float) -> SampleSeries:
    """Linear interpolation onto an equidistant grid."""
    xa, ya = as_series_arrays(x, y)
    if xa.size < 2:
        raise TooFewDataPointsError("linear interpolation needs at least two points", 2, xa.size)
    return _resample(lambda: linear_coeffc(xa, ya), xa, start, step)
