"""Tests for the statistics helpers."""
from __future__ import annotations

import math

import numpy as np
import pytest

from fastrt_core.numerics.stats import (
    binomial,
    binomial_average,
    factorial,
    mean,
    standard_deviation,
    weighted_mean,
    weighted_standard_deviation,
)

DATA = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]


def test_means() -> None:
    assert mean(DATA) == pytest.approx(5.0)
    assert weighted_mean([1.0, 3.0], [1.0, 1.0]) == pytest.approx(2.0)
    # sigma 2 has a quarter of the weight of sigma 1
    assert weighted_mean([0.0, 5.0], [1.0, 2.0]) == pytest.approx(1.0)
    with pytest.raises(ValueError):
        mean([])


def test_standard_deviations() -> None:
    assert standard_deviation(DATA) == pytest.approx(math.sqrt(32.0 / 7.0))
    sigma = np.full(len(DATA), 0.3)
    assert weighted_standard_deviation(DATA, sigma) == pytest.approx(standard_deviation(DATA))
    with pytest.raises(ValueError):
        standard_deviation([1.0])


def test_factorial_and_binomial() -> None:
    assert factorial(0) == 1.0
    assert factorial(5) == 120.0
    assert factorial(170) > 1e306
    with pytest.raises(OverflowError):
        factorial(171)
    assert binomial(5, 2) == 10
    assert binomial(10, 0) == 1
    assert binomial(3, 5) == 0


def test_binomial_average() -> None:
    assert np.allclose(binomial_average([0.0, 0.0, 4.0, 0.0, 0.0], 2), [0.0, 1.0, 2.0, 1.0, 0.0])
    assert np.allclose(binomial_average([4.0, 0.0, 0.0], 2), [8.0 / 3.0, 1.0, 0.0])
    assert np.allclose(binomial_average(np.full(7, 2.5), 4), 2.5)
    assert np.array_equal(binomial_average([1.0, 2.0], 0), [1.0, 2.0])


def test_exported_from_numerics() -> None:
    from fastrt_core import numerics

    for name in ("mean", "weighted_mean", "standard_deviation", "binomial_average"):
        assert name in numerics.__all__
    assert numerics.binomial(4, 2) == 6
