"""Tests for trapezoid and interpolant integration."""
from __future__ import annotations

import numpy as np
import pytest
from scipy.interpolate import CubicSpline

from fastrt_core.exceptions import ErrorCode, LimitsOutOfRangeError
from fastrt_core.numerics.integrate import (
    integrate,
    integrate_linear,
    integrate_piecewise,
    integrate_spline,
    trapezoid_weights,
)
from fastrt_core.numerics.spline import appspl_coeffc

X = np.array([0.0, 0.5, 1.5, 3.0, 4.0])
Y = 2.0 * X + 1.0


def test_trapezoid() -> None:
    assert integrate([0.0, 1.0, 2.0], [0.0, 1.0, 0.0]) == pytest.approx(1.0)
    assert integrate(X, Y) == pytest.approx(20.0)
    assert integrate([1.0], [5.0]) == 0.0


def test_trapezoid_weights_sum_to_length() -> None:
    w = trapezoid_weights(X)
    assert w.sum() == pytest.approx(4.0)
    assert np.dot(w, Y) == pytest.approx(20.0)


def test_linear_and_spline_integrals_of_a_line() -> None:
    assert integrate_linear(X, Y, 0.0, 4.0) == pytest.approx(20.0)
    assert integrate_linear(X, Y, 0.25, 3.5) == pytest.approx(15.4375)
    assert integrate_spline(X, Y, 0.25, 3.5) == pytest.approx(15.4375)


def test_reversed_limits_change_sign() -> None:
    assert integrate_spline(X, Y, 3.5, 0.25) == pytest.approx(-15.4375)


def test_zero_width_interval() -> None:
    assert integrate_spline(X, Y, 1.2, 1.2) == 0.0
    # no fit is attempted for an empty interval
    assert integrate_spline([1.0, 0.0], [0.0, 0.0], 2.0, 2.0) == 0.0


def test_limits_at_the_ends() -> None:
    assert integrate_linear(X, Y, 4.0, 4.0) == 0.0
    assert integrate_linear(X, Y, 1.5, 1.5 + 1e-14) == pytest.approx(0.0, abs=1e-10)
    assert integrate_linear(X, Y, 0.5, 1.5) == pytest.approx(3.0)


def test_limits_out_of_range() -> None:
    with pytest.raises(LimitsOutOfRangeError) as excinfo:
        integrate_spline(X, Y, -1.0, 2.0)
    assert excinfo.value.code == ErrorCode.LIMITS_OUT_OF_RANGE
    with pytest.raises(LimitsOutOfRangeError):
        integrate_linear(X, Y, 1.0, 4.5)
    with pytest.raises(LimitsOutOfRangeError):
        integrate_linear(X, Y, 5.0, 6.0)


def test_spline_integral_matches_scipy() -> None:
    rng = np.random.default_rng(11)
    x = np.cumsum(rng.uniform(0.1, 1.0, 15))
    y = rng.normal(size=15)
    ref = CubicSpline(x, y, bc_type="natural")
    for a, b in [(x[0], x[-1]), (x[2] + 0.03, x[9] - 0.01), (x[4] + 0.01, x[4] + 0.02)]:
        assert integrate_spline(x, y, a, b) == pytest.approx(ref.integrate(a, b), rel=1e-9, abs=1e-12)


def test_integrate_fitted_curve() -> None:
    x = np.linspace(0.0, 5.0, 11)
    fit = appspl_coeffc(x, 2.0 * x + 1.0, np.ones(x.size))
    assert integrate_piecewise(fit, 0.0, 5.0) == pytest.approx(30.0)


def test_full_range_spline_matches_linear_and_trapezoid() -> None:
    full = 20.0
    assert integrate_spline(X, Y, X[0], X[-1]) == pytest.approx(full)
    assert integrate_spline(X, Y, X[0], X[-1]) == pytest.approx(integrate_linear(X, Y, X[0], X[-1]))
    assert integrate(X, Y) == pytest.approx(full)
