"""Unit tests for slit-function kernels."""
from __future__ import annotations

import math

import numpy as np
import pytest

from fastrt_core.exceptions import ConvNotCenteredError, ConvNotEquidistantError, NegativeWeightingFactorsError
from fastrt_core.numerics.convolve import convolute
from fastrt_core.numerics.integrate import trapezoid_weights
from fastrt_core.physics.srf import (
    fwhm_to_sigma,
    gaussian_kernel,
    normalise_kernel,
    sigma_to_fwhm,
    tabulated_kernel,
    triangular_kernel,
)


def test_fwhm_sigma_round_trip() -> None:
    assert fwhm_to_sigma(sigma_to_fwhm(3.0)) == pytest.approx(3.0)
    assert sigma_to_fwhm(1.0) == pytest.approx(2.0 * math.sqrt(2.0 * math.log(2.0)))


def test_gaussian_kernel_layout() -> None:
    kernel = gaussian_kernel(2.0, 0.5)
    assert kernel.n == 25
    assert kernel.x[12] == 0.0
    assert kernel.y[12] == pytest.approx(1.0)
    # half maximum at +-fwhm/2
    assert kernel.y[14] == pytest.approx(0.5)
    assert np.allclose(kernel.y, kernel.y[::-1])


def test_triangular_kernel() -> None:
    kernel = triangular_kernel(1.0, 0.25)
    assert kernel.x.tolist() == [-1.0, -0.75, -0.5, -0.25, 0.0, 0.25, 0.5, 0.75, 1.0]
    assert kernel.y[2] == pytest.approx(0.5)
    assert kernel.y[0] == 0.0 and kernel.y[-1] == 0.0


def test_normalise_kernel_unit_area() -> None:
    kernel = normalise_kernel(gaussian_kernel(1.5, 0.1))
    assert float(np.sum(trapezoid_weights(kernel.x) * kernel.y)) == pytest.approx(1.0)
    single = normalise_kernel(tabulated_kernel([0.0], [4.0]))
    assert single.y.tolist() == [1.0]


def test_invalid_kernel_arguments() -> None:
    with pytest.raises(ValueError):
        gaussian_kernel(0.0, 0.1)
    with pytest.raises(ValueError):
        triangular_kernel(1.0, -0.1)


def test_tabulated_kernel_validation() -> None:
    kernel = tabulated_kernel([-0.2, 0.0, 0.2], [0.5, 1.0, 0.5])
    assert kernel.n == 3
    with pytest.raises(ConvNotEquidistantError):
        tabulated_kernel([-0.2, 0.0, 0.3], [0.5, 1.0, 0.5])
    with pytest.raises(ConvNotCenteredError):
        tabulated_kernel([-0.1, 0.1, 0.3], [0.5, 1.0, 0.5])
    with pytest.raises(NegativeWeightingFactorsError):
        tabulated_kernel([-0.2, 0.0, 0.2], [0.5, 1.0, -0.5])


def test_gaussian_on_gaussian_variance() -> None:
    x = np.arange(-400, 401) * 0.5
    sigma_signal = 5.0
    sigma_kernel = 8.0
    signal = np.exp(-0.5 * (x / sigma_signal) ** 2)
    kernel = gaussian_kernel(sigma_to_fwhm(sigma_kernel), 0.5, width=3.0)
    out = convolute(x, signal, kernel.x, kernel.y).y
    weights = out / out.sum()
    mean = float(np.sum(weights * x))
    variance = float(np.sum(weights * (x - mean) ** 2))
    expected = sigma_signal**2 + sigma_kernel**2
    assert abs(variance - expected) / expected < 0.05


def test_normalise_kernel_docstring() -> None:
    assert normalise_kernel.__doc__.strip().startswith("Scale the kernel to unit area")
