"""Tests for the weighted approximating spline."""
from __future__ import annotations

import numpy as np
import pytest

from fastrt_core.exceptions import (
    DataNotSortedError,
    ErrorCode,
    NegativeWeightingFactorsError,
    TooFewDataPointsError,
)
from fastrt_core.numerics.spline import appspl, appspl_coeffc, calc_splined_values, spline_coeffc


def _noisy(n: int = 10, seed: int = 0) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    x = np.cumsum(rng.uniform(0.5, 1.5, n))
    y = np.sin(x) + 0.1 * rng.normal(size=n)
    return x, y


def test_large_weights_interpolate() -> None:
    x, y = _noisy()
    fit = appspl_coeffc(x, y, np.full(x.size, 1e10))
    ref = spline_coeffc(x, y)
    xs = np.linspace(x[0], x[-1], 50)
    assert np.allclose(fit.a0, y, atol=1e-6)
    assert np.allclose(calc_splined_values(xs, fit), calc_splined_values(xs, ref), atol=1e-5)


def test_small_weights_give_least_squares_line() -> None:
    x, y = _noisy(seed=1)
    w = np.full(x.size, 1e-6)
    fit = appspl_coeffc(x, y, w)
    slope, intercept = np.polyfit(x, y, 1)
    assert np.allclose(fit.a0, slope * x + intercept, atol=1e-3)
    assert np.allclose(fit.a2, 0.0, atol=1e-3)


def test_straight_line_is_preserved() -> None:
    x = np.linspace(0.0, 5.0, 8)
    rng = np.random.default_rng(3)
    fit = appspl_coeffc(x, 3.0 * x - 1.0, rng.uniform(0.1, 10.0, x.size))
    assert np.allclose(fit.a0, 3.0 * x - 1.0)
    assert np.allclose(fit.a1[:-1], 3.0)


def test_zero_weight_matches_fit_without_the_point() -> None:
    x, y = _noisy(n=9, seed=4)
    w = np.ones(x.size)
    w[3] = 0.0
    fit = appspl_coeffc(x, y, w)
    keep = w > 0.0
    reduced = appspl_coeffc(x[keep], y[keep], w[keep])
    xs = np.linspace(x[0], x[-1], 77)
    assert np.allclose(calc_splined_values(xs, fit), calc_splined_values(xs, reduced))
    assert fit.n == x.size


def test_zero_weight_at_the_edge_continues_linearly() -> None:
    x, y = _noisy(n=9, seed=5)
    w = np.ones(x.size)
    w[0] = 0.0
    fit = appspl_coeffc(x, y, w)
    reduced = appspl_coeffc(x[1:], y[1:], w[1:])
    expected = reduced.a0[0] + reduced.a1[0] * (x[0] - x[1])
    assert fit.a0[0] == pytest.approx(expected)
    assert fit.a2[0] == 0.0 and fit.a3[0] == 0.0


def test_preconditions() -> None:
    x, y = _noisy()
    with pytest.raises(TooFewDataPointsError) as excinfo:
        appspl_coeffc(x[:5], y[:5], np.ones(5))
    assert excinfo.value.code == ErrorCode.TOO_FEW_DATA_POINTS
    with pytest.raises(DataNotSortedError) as excinfo:
        appspl_coeffc(x[::-1], y, np.ones(x.size))
    assert excinfo.value.code == ErrorCode.DATA_NOT_SORTED
    w = np.ones(x.size)
    w[2] = -1.0
    with pytest.raises(NegativeWeightingFactorsError):
        appspl_coeffc(x, y, w)


def test_too_many_zero_weights() -> None:
    x, y = _noisy(n=8)
    w = np.ones(x.size)
    w[:3] = 0.0
    with pytest.raises(TooFewDataPointsError):
        appspl_coeffc(x, y, w)


def test_appspl_resampling() -> None:
    x = np.linspace(0.0, 9.0, 10)
    y = 0.5 * x
    out = appspl(x, y, np.ones(x.size), start=0.0, step=1.5)
    assert np.allclose(out.x, np.arange(7) * 1.5)
    assert np.allclose(out.y, 0.5 * out.x)
