# fastrt_core/physics/srf.py
"""
Instrument spectral response (slit) kernels for the convolver.

Design goals
------------
- Kernels are sampled on ``k * step`` for integer k, so the center tap sits at
  exactly 0.0 and the grid is equidistant by construction.
- Profiles are evaluated with PyTorch tensors (float64) and handed back as a
  :class:`~fastrt_core.types.SampleSeries`, ready for
  :func:`~fastrt_core.numerics.convolve.convolute` and
  :func:`~fastrt_core.numerics.convolve.convolute_batch`.
- Unit area normalisation uses the trapezoid rule.
"""

from __future__ import annotations

import math

import numpy as np
import torch

from fastrt_core.exceptions import ConvNotCenteredError, ConvNotEquidistantError, NegativeWeightingFactorsError
from fastrt_core.numerics.convolve import equidistant_step, kernel_center
from fastrt_core.numerics.integrate import trapezoid_weights
from fastrt_core.types import ArrayLike, SampleSeries, as_series_arrays

Tensor = torch.Tensor

__all__ = [
    "fwhm_to_sigma",
    "sigma_to_fwhm",
    "gaussian_kernel",
    "triangular_kernel",
    "normalise_kernel",
    "tabulated_kernel",
]

_FWHM_PER_SIGMA = 2.0 * math.sqrt(2.0 * math.log(2.0))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def fwhm_to_sigma(fwhm: float | Tensor) -> float | Tensor:
    """Convert FWHM to sigma for a Gaussian: σ = FWHM / (2√(2 ln 2))."""
    return fwhm / _FWHM_PER_SIGMA


def sigma_to_fwhm(sigma: float | Tensor) -> float | Tensor:
    """Convert sigma to FWHM for a Gaussian: FWHM = 2√(2 ln 2) · σ."""
    return sigma * _FWHM_PER_SIGMA


def _symmetric_taps(half_width: float, step: float) -> Tensor:
    if step <= 0.0:
        raise ValueError("step must be positive")
    if half_width < 0.0:
        raise ValueError("kernel half width must be non-negative")
    k = int(math.floor(half_width / step + 1e-9))
    return torch.arange(-k, k + 1, dtype=torch.float64) * step


def _to_series(x: Tensor, y: Tensor) -> SampleSeries:
    return SampleSeries.from_arrays(x.numpy(), y.numpy())


# ---------------------------------------------------------------------------
# Kernel construction
# ---------------------------------------------------------------------------

def gaussian_kernel(fwhm: float, step: float, width: float = 3.0) -> SampleSeries:
    """
    Gaussian slit function of the given FWHM.

    Parameters
    ----------
    fwhm : full width at half maximum, same unit as ``step``.
    step : tap spacing; must match the spectrum step for ``convolute``.
    width : the kernel covers |x| <= width * fwhm.

    Returns
    -------
    kernel : SampleSeries with unit peak (use :func:`normalise_kernel` for unit area).
    """
    if fwhm <= 0.0:
        raise ValueError("fwhm must be positive")
    x = _symmetric_taps(width * fwhm, step)
    sigma = fwhm_to_sigma(float(fwhm))
    y = torch.exp(-0.5 * (x / sigma) ** 2)
    return _to_series(x, y)


def triangular_kernel(fwhm: float, step: float) -> SampleSeries:
    """Triangular slit function; half maximum at ±fwhm/2, zero at ±fwhm."""
    if fwhm <= 0.0:
        raise ValueError("fwhm must be positive")
    x = _symmetric_taps(fwhm, step)
    y = (1.0 - x.abs() / fwhm).clamp_min(0.0)
    return _to_series(x, y)


def normalise_kernel(kernel: SampleSeries) -> SampleSeries:
    """
    Scale the kernel to unit area (trapezoid rule).

    A single-tap kernel has no extent and is scaled to unit weight instead.
    """
    x, y = kernel
    if x.size < 2:
        area = float(np.sum(y))
    else:
        area = float(np.sum(trapezoid_weights(x) * y))
    if area == 0.0:
        raise ValueError("kernel has zero area")
    return SampleSeries.from_arrays(x, y / area)


def tabulated_kernel(x: ArrayLike, y: ArrayLike) -> SampleSeries:
    """
    Validate a tabulated kernel: equidistant, with a tap at exactly 0.0 and
    non-negative weights.
    """
    xa, ya = as_series_arrays(x, y)
    if xa.size == 0:
        raise ConvNotCenteredError("empty kernel")
    equidistant_step(xa, ConvNotEquidistantError, "kernel")
    kernel_center(xa)
    negative = np.flatnonzero(ya < 0.0)
    if negative.size:
        raise NegativeWeightingFactorsError(f"negative kernel weight at index {int(negative[0])}")
    return SampleSeries.from_arrays(xa, ya)
