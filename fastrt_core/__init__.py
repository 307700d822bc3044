"""Numeric core of a fast radiative transfer model: solvers, splines, integration, convolution."""
from importlib import metadata

from fastrt_core.exceptions import ErrorCode, NumericsError
from fastrt_core.numerics import (
    appspl,
    appspl_coeffc,
    calc_splined_value,
    calc_splined_values,
    convolute,
    convolute_batch,
    int_convolute,
    integrate,
    integrate_linear,
    integrate_piecewise,
    integrate_spline,
    linear_coeffc,
    linear_eqd,
    solve_five,
    solve_five_ms,
    solve_gauss,
    solve_three,
    solve_three_ms,
    spline,
    spline_coeffc,
)
from fastrt_core.physics import gaussian_kernel, normalise_kernel, tabulated_kernel, triangular_kernel
from fastrt_core.types import PiecewiseCubic, SampleSeries

__all__ = [
    "__version__",
    "ErrorCode",
    "NumericsError",
    "SampleSeries",
    "PiecewiseCubic",
    "solve_gauss",
    "solve_three",
    "solve_three_ms",
    "solve_five",
    "solve_five_ms",
    "spline_coeffc",
    "linear_coeffc",
    "appspl_coeffc",
    "calc_splined_value",
    "calc_splined_values",
    "spline",
    "appspl",
    "linear_eqd",
    "integrate",
    "integrate_spline",
    "integrate_linear",
    "integrate_piecewise",
    "convolute",
    "int_convolute",
    "convolute_batch",
    "gaussian_kernel",
    "triangular_kernel",
    "normalise_kernel",
    "tabulated_kernel",
]


def _get_version() -> str:
    try:
        return metadata.version("fastrt-core")
    except metadata.PackageNotFoundError:  # pragma: no cover - fallback for dev installs
        return "0.0.0"


__version__ = _get_version()
