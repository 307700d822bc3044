from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union
import numpy as np
import numpy.typing as npt


NDArrayF = npt.NDArray[np.floating]
ArrayLike = Union[Sequence[float], NDArrayF]


def as_float_array(values: ArrayLike, name: str = "array") -> NDArrayF:
    """Return a fresh 1-D float64 copy of ``values``."""
    arr = np.array(values, dtype=np.float64, copy=True)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D")
    return arr


def as_series_arrays(x: ArrayLike, y: ArrayLike) -> Tuple[NDArrayF, NDArrayF]:
    """Coerce an (x, y) pair to float64 copies of matching length."""
    xa = as_float_array(x, "x")
    ya = as_float_array(y, "y")
    if xa.size != ya.size:
        raise ValueError(f"x and y must have the same length ({xa.size} != {ya.size})")
    return xa, ya


def _readonly(arr: NDArrayF) -> NDArrayF:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class SampleSeries:
    """Ordered (x, y) samples. Unpacks as ``x, y = series``."""
    x: NDArrayF                 # [n]
    y: NDArrayF                 # [n]

    def __post_init__(self):
        if self.x.ndim != 1 or self.y.ndim != 1:
            raise ValueError("SampleSeries arrays must be 1-D")
        if self.x.size != self.y.size:
            raise ValueError("SampleSeries x and y must have same length")

    @classmethod
    def from_arrays(cls, x: ArrayLike, y: ArrayLike) -> "SampleSeries":
        xa, ya = as_series_arrays(x, y)
        return cls(x=xa, y=ya)

    def __iter__(self) -> Iterator[NDArrayF]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return int(self.x.size)

    @property
    def n(self) -> int:
        return int(self.x.size)

    @property
    def step(self) -> float:
        """First sampling step; 0.0 for a single sample."""
        if self.x.size < 2:
            return 0.0
        return float(self.x[1] - self.x[0])


@dataclass(frozen=True)
class PiecewiseCubic:
    """
    Piecewise cubic f(x) = a0 + a1*dx + a2*dx**2 + a3*dx**3, dx = x - x[i], on [x[i], x[i+1]).

    All arrays have length n. Entries 0..n-2 describe the intervals; the trailing
    entry only holds the curve value at the last knot in a0[n-1].
    """
    x: NDArrayF
    a0: NDArrayF
    a1: NDArrayF
    a2: NDArrayF
    a3: NDArrayF

    def __post_init__(self):
        n = self.x.size
        if self.x.ndim != 1 or n < 2:
            raise ValueError("PiecewiseCubic.x must be 1-D with length >= 2")
        for name in ("a0", "a1", "a2", "a3"):
            arr = getattr(self, name)
            if arr.ndim != 1 or arr.size != n:
                raise ValueError(f"PiecewiseCubic.{name} must be 1-D of same length as x")
        for name in ("x", "a0", "a1", "a2", "a3"):
            _readonly(getattr(self, name))

    @property
    def n(self) -> int:
        return int(self.x.size)

    @property
    def bounds(self) -> Tuple[float, float]:
        return float(self.x[0]), float(self.x[-1])

    def segment(self, i: int) -> Tuple[float, float, float, float]:
        return float(self.a0[i]), float(self.a1[i]), float(self.a2[i]), float(self.a3[i])
