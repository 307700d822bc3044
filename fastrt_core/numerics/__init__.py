"""Equation solvers, splines, integration and convolution."""

from fastrt_core.numerics.convolve import convolute, convolute_batch, int_convolute
from fastrt_core.numerics.equation import (
    band_from_full,
    solve_five,
    solve_five_ms,
    solve_gauss,
    solve_three,
    solve_three_ms,
)
from fastrt_core.numerics.integrate import (
    integrate,
    integrate_linear,
    integrate_piecewise,
    integrate_spline,
    trapezoid_weights,
)
from fastrt_core.numerics.spline import (
    appspl,
    appspl_coeffc,
    calc_splined_value,
    calc_splined_values,
    linear_coeffc,
    linear_eqd,
    spline,
    spline_coeffc,
)
from fastrt_core.numerics.stats import (
    binomial,
    binomial_average,
    factorial,
    mean,
    standard_deviation,
    weighted_mean,
    weighted_standard_deviation,
)

__all__ = [
    "solve_gauss",
    "solve_three",
    "solve_three_ms",
    "solve_five",
    "solve_five_ms",
    "band_from_full",
    "spline_coeffc",
    "linear_coeffc",
    "appspl_coeffc",
    "calc_splined_value",
    "calc_splined_values",
    "spline",
    "appspl",
    "linear_eqd",
    "trapezoid_weights",
    "integrate",
    "integrate_spline",
    "integrate_linear",
    "integrate_piecewise",
    "convolute",
    "int_convolute",
    "convolute_batch",
    "mean",
    "weighted_mean",
    "standard_deviation",
    "weighted_standard_deviation",
    "factorial",
    "binomial",
    "binomial_average",
]
