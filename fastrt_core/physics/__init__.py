"""Instrument response kernels."""

from fastrt_core.physics.srf import (
    fwhm_to_sigma,
    gaussian_kernel,
    normalise_kernel,
    sigma_to_fwhm,
    tabulated_kernel,
    triangular_kernel,
)

__all__ = [
    "fwhm_to_sigma",
    "sigma_to_fwhm",
    "gaussian_kernel",
    "triangular_kernel",
    "normalise_kernel",
    "tabulated_kernel",
]
