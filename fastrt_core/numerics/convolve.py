"""
Center-aligned discrete convolution of spectra with instrument response kernels.

Design
------
- Spectrum and kernel live on equidistant grids; the kernel's center is its
  first tap with abscissa exactly 0.0.
- Output i collects ``w_k * y[i - mid + k]`` over the taps whose source index is
  inside the spectrum and divides by the sum of exactly those weights. Edges
  are therefore normalised by the weights actually used, not zero padded.
- ``int_convolute`` resamples the spectrum onto the kernel step with linear
  interpolation, convolves, and interpolates the result back.
- ``convolute_batch`` applies the same operator to a (B, L) batch of spectra
  with ``torch.nn.functional.conv1d``.
"""
from __future__ import annotations

import logging
import math
from typing import Type

import numpy as np
import torch
from torch.nn import functional as F

from fastrt_core.exceptions import (
    ConvNotCenteredError,
    ConvNotEquidistantError,
    NumericsError,
    SpecConvDifferentError,
    SpecNotEquidistantError,
)
from fastrt_core.numerics.spline import calc_splined_values, linear_coeffc
from fastrt_core.types import ArrayLike, NDArrayF, SampleSeries, as_float_array, as_series_arrays
from fastrt_core.utils.floats import DOUBLE_RELATIVE_ERROR, double_equal

Tensor = torch.Tensor

logger = logging.getLogger(__name__)

__all__ = [
    "equidistant_step",
    "kernel_center",
    "convolute",
    "int_convolute",
    "convolute_batch",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def equidistant_step(x: NDArrayF, error: Type[NumericsError], name: str = "series") -> float:
    """
    Return the step of an equidistant grid, raising ``error`` otherwise.

    Steps are compared relatively with :func:`double_equal`. A single sample
    has step 0.0.
    """
    if x.size < 2:
        return 0.0
    step = float(x[1] - x[0])
    diffs = np.diff(x)
    for i in range(1, diffs.size):
        if not double_equal(float(diffs[i]), step):
            raise error(f"{name} not equidistant at index {i + 1}")
    return step


def kernel_center(x_conv: NDArrayF) -> int:
    """Index of the first kernel tap with abscissa exactly 0.0."""
    hits = np.flatnonzero(x_conv == 0.0)
    if hits.size == 0:
        raise ConvNotCenteredError("convolution kernel has no tap at exactly 0")
    return int(hits[0])


def _check_steps(spec_step: float, conv_step: float, spec_n: int, conv_n: int) -> None:
    # a single-tap kernel has no step; a single-sample spectrum has step 0
    if conv_n < 2:
        return
    if spec_n < 2:
        raise SpecConvDifferentError(f"single-sample spectrum has no step, kernel step is {conv_step}")
    if not double_equal(conv_step, spec_step):
        raise SpecConvDifferentError(f"spectrum step {spec_step} differs from kernel step {conv_step}")


def _convolve_centered(y: NDArrayF, weights: NDArrayF, mid: int) -> NDArrayF:
    n = y.size
    acc = np.zeros(n, dtype=np.float64)
    used = np.zeros(n, dtype=np.float64)
    for k, weight in enumerate(weights):
        shift = k - mid
        lo = max(0, -shift)
        hi = min(n, n - shift)
        if lo >= hi:
            continue
        acc[lo:hi] += weight * y[lo + shift:hi + shift]
        used[lo:hi] += weight
    out = np.zeros(n, dtype=np.float64)
    np.divide(acc, used, out=out, where=used != 0.0)
    return out


# ---------------------------------------------------------------------------
# Convolution on the spectrum grid
# ---------------------------------------------------------------------------

def convolute(x_spec: ArrayLike, y_spec: ArrayLike, x_conv: ArrayLike, y_conv: ArrayLike) -> SampleSeries:
    """
    Convolve the spectrum (x_spec, y_spec) with the kernel (x_conv, y_conv).

    Both grids must be equidistant with the same step. The output is defined
    on every input abscissa, including the edges.
    """
    xs, ys = as_series_arrays(x_spec, y_spec)
    xc, yc = as_series_arrays(x_conv, y_conv)

    spec_step = equidistant_step(xs, SpecNotEquidistantError, "spectrum")
    conv_step = equidistant_step(xc, ConvNotEquidistantError, "kernel")
    _check_steps(spec_step, conv_step, xs.size, xc.size)
    mid = kernel_center(xc)

    logger.debug("convolving %d samples with %d taps (center %d)", xs.size, xc.size, mid)
    return SampleSeries(x=xs, y=_convolve_centered(ys, yc, mid))


def int_convolute(x_spec: ArrayLike, y_spec: ArrayLike, x_conv: ArrayLike, y_conv: ArrayLike) -> NDArrayF:
    """
    Convolve a spectrum with a kernel of independent resolution.

    The spectrum is linearly interpolated onto the kernel step, convolved and
    interpolated back onto ``x_spec``. Only the kernel must be equidistant.
    """
    xs, ys = as_series_arrays(x_spec, y_spec)
    xc, yc = as_series_arrays(x_conv, y_conv)

    step = equidistant_step(xc, ConvNotEquidistantError, "kernel")
    coeffs = linear_coeffc(xs, ys)

    if xc.size < 2:
        kernel_center(xc)
        return ys.copy()

    count = int(math.ceil((xs[-1] - xs[0]) / step)) + 1
    x_fine = xs[0] + np.arange(count, dtype=np.float64) * step
    # points within rounding of xs[-1] are evaluated at xs[-1]
    slack = DOUBLE_RELATIVE_ERROR * max(abs(float(xs[-1])), step)
    x_eval = np.minimum(x_fine, xs[-1])
    if x_fine[-1] > xs[-1] + slack and count > 1:
        logger.warning("last resampled point %g beyond spectrum, repeating previous value", x_fine[-1])
        y_fine = calc_splined_values(x_eval[:-1], coeffs)
        y_fine = np.append(y_fine, y_fine[-1])
    else:
        y_fine = calc_splined_values(x_eval, coeffs)

    mid = kernel_center(xc)
    logger.debug("int_convolute: %d samples resampled to %d (step %g)", xs.size, count, step)
    y_conv_fine = _convolve_centered(y_fine, yc, mid)

    back = linear_coeffc(x_fine, y_conv_fine)
    # the fine grid may end a rounding error short of xs[-1]
    return calc_splined_values(np.clip(xs, x_fine[0], x_fine[-1]), back)


# ---------------------------------------------------------------------------
# Batched convolution (torch)
# ---------------------------------------------------------------------------

def convolute_batch(
    x_spec: ArrayLike,
    spectra: Tensor | ArrayLike,
    x_conv: ArrayLike,
    y_conv: ArrayLike,
) -> Tensor:
    """
    Apply :func:`convolute` to a batch of spectra sharing one abscissa grid.

    Parameters
    ----------
    x_spec : (L,)
    spectra : (B, L) or (L,)
    x_conv, y_conv : (M,)

    Returns
    -------
    out : (B, L) tensor with the dtype/device of ``spectra`` (float64 for array input).
    """
    xs = as_float_array(x_spec, "x_spec")
    xc, yc = as_series_arrays(x_conv, y_conv)

    if isinstance(spectra, torch.Tensor):
        batch = spectra
    else:
        batch = torch.as_tensor(np.asarray(spectra, dtype=np.float64))
    if batch.ndim == 1:
        batch = batch.unsqueeze(0)
    if batch.ndim != 2:
        raise ValueError("spectra must be (B, L) or (L,)")
    if batch.shape[1] != xs.size:
        raise ValueError(f"Grid mismatch: spectra L={batch.shape[1]}, x_spec L={xs.size}")

    spec_step = equidistant_step(xs, SpecNotEquidistantError, "spectrum")
    conv_step = equidistant_step(xc, ConvNotEquidistantError, "kernel")
    _check_steps(spec_step, conv_step, xs.size, xc.size)
    mid = kernel_center(xc)

    m = yc.size
    dtype = batch.dtype if batch.is_floating_point() else torch.float64
    inputs = batch.to(dtype=dtype).unsqueeze(1)                                # (B, 1, L)
    weight = torch.as_tensor(yc, dtype=dtype, device=batch.device).view(1, 1, m)
    pad = (mid, m - 1 - mid)

    # conv1d is a cross-correlation: out[i] = sum_k w[k] * padded[i + k]
    acc = F.conv1d(F.pad(inputs, pad), weight)
    ones = torch.ones((1, 1, xs.size), dtype=dtype, device=batch.device)
    used = F.conv1d(F.pad(ones, pad), weight)

    out = torch.where(used != 0, acc / torch.where(used != 0, used, torch.ones_like(used)), torch.zeros_like(acc))
    return out.squeeze(1)
