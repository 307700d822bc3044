"""Averaging and simple statistics of sampled data."""
from __future__ import annotations

import math
import sys

import numpy as np

from fastrt_core.types import ArrayLike, NDArrayF, as_float_array

__all__ = [
    "mean",
    "weighted_mean",
    "standard_deviation",
    "weighted_standard_deviation",
    "factorial",
    "binomial",
    "binomial_average",
]


def mean(x: ArrayLike) -> float:
    xa = as_float_array(x, "x")
    if xa.size == 0:
        raise ValueError("mean of an empty sequence")
    return float(xa.sum() / xa.size)


def weighted_mean(x: ArrayLike, sigma: ArrayLike) -> float:
    """Mean weighted by 1/sigma**2."""
    xa = as_float_array(x, "x")
    sa = as_float_array(sigma, "sigma")
    if xa.size != sa.size or xa.size == 0:
        raise ValueError("x and sigma must be non-empty and of equal length")
    inv_var = 1.0 / (sa * sa)
    return float(np.sum(xa * inv_var) / np.sum(inv_var))


def standard_deviation(x: ArrayLike) -> float:
    """Sample standard deviation (n - 1 in the denominator)."""
    xa = as_float_array(x, "x")
    if xa.size < 2:
        raise ValueError("standard deviation needs at least two values")
    mu = mean(xa)
    return math.sqrt(float(np.sum((xa - mu) ** 2)) / (xa.size - 1))


def weighted_standard_deviation(x: ArrayLike, sigma: ArrayLike) -> float:
    xa = as_float_array(x, "x")
    sa = as_float_array(sigma, "sigma")
    if xa.size != sa.size or xa.size < 2:
        raise ValueError("x and sigma must have equal length >= 2")
    mu = weighted_mean(xa, sa)
    inv_var = 1.0 / (sa * sa)
    n = xa.size
    var = float(np.sum((xa - mu) ** 2 * inv_var)) * (n / (n - 1)) / float(np.sum(inv_var))
    return math.sqrt(var)


def factorial(n: int) -> float:
    """n! as a float; n <= 0 gives 1. Raises OverflowError beyond the float range."""
    result = 1.0
    for k in range(2, int(n) + 1):
        result *= k
        if result > sys.float_info.max:
            raise OverflowError(f"{n}! exceeds the floating point range")
    return result


def binomial(n: int, m: int) -> int:
    """Binomial coefficient "n over m"."""
    if m < 0 or m > n:
        return 0
    return int(factorial(n) / factorial(m) / factorial(n - m) + 0.5)


def binomial_average(y: ArrayLike, width: int) -> NDArrayF:
    """
    Smooth ``y`` with binomial weights C(width, j), j = 0..width.

    The window is centred on each sample (offset width // 2); at the edges the
    result is normalised by the weights that fall inside the data.
    """
    ya = as_float_array(y, "y")
    if width < 0:
        raise ValueError("width must be non-negative")
    weights = np.array([binomial(width, j) for j in range(width + 1)], dtype=np.float64)
    n = ya.size
    acc = np.zeros(n, dtype=np.float64)
    used = np.zeros(n, dtype=np.float64)
    for j, weight in enumerate(weights):
        shift = j - width // 2
        lo = max(0, -shift)
        hi = min(n, n - shift)
        if lo >= hi:
            continue
        acc[lo:hi] += weight * ya[lo + shift:hi + shift]
        used[lo:hi] += weight
    return acc / used
