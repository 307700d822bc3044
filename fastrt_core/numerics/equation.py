"""
Linear equation solvers: Gauss elimination and banded (three- and five-diagonal) systems.

Design
------
- ``solve_gauss`` pivots with the "relative column maximum" strategy
  (H. R. Schwarz, Numerische Mathematik) and works on private copies; the
  caller's matrix and right-hand side are never permuted.
- The banded solvers follow the factorisations of Engeln-Muellges. Full
  (n, n) variants extract the bands and delegate to the compact ("_ms")
  variants, which take the band as (n, 3) ``(sub, diag, super)`` or (n, 5)
  ``(sub2, sub1, diag, super1, super2)``. Compact slots that fall outside the
  matrix are ignored.
- A zero pivot or zero elimination factor raises
  :class:`~fastrt_core.exceptions.SingularMatrixError`.
"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from fastrt_core.exceptions import SingularMatrixError
from fastrt_core.types import ArrayLike, NDArrayF

logger = logging.getLogger(__name__)

__all__ = [
    "solve_gauss",
    "solve_three",
    "solve_three_ms",
    "solve_five",
    "solve_five_ms",
    "band_from_full",
]


def _as_matrix(A: ArrayLike | Sequence[Sequence[float]], name: str = "A") -> NDArrayF:
    arr = np.array(A, dtype=np.float64, copy=True)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be 2-D")
    return arr


def _as_rhs(b: ArrayLike, n: int) -> NDArrayF:
    arr = np.array(b, dtype=np.float64, copy=True)
    if arr.ndim != 1 or arr.size != n:
        raise ValueError(f"b must be 1-D of length {n}")
    return arr


def band_from_full(A: ArrayLike | Sequence[Sequence[float]], width: int) -> NDArrayF:
    """
    Extract the ``width`` central diagonals of a square matrix into compact storage.

    Row i of the result holds A[i, i - width//2 : i + width//2 + 1]; slots
    outside the matrix are zero.
    """
    full = _as_matrix(A)
    n = full.shape[0]
    if full.shape != (n, n):
        raise ValueError("A must be square")
    if width % 2 != 1:
        raise ValueError("width must be odd")
    half = width // 2
    band = np.zeros((n, width), dtype=np.float64)
    for offset in range(-half, half + 1):
        diag = np.diagonal(full, offset)
        col = offset + half
        if offset < 0:
            band[-offset:, col] = diag
        else:
            band[: n - offset, col] = diag
    return band


# ---------------------------------------------------------------------------
# Gauss elimination
# ---------------------------------------------------------------------------

def solve_gauss(A: ArrayLike | Sequence[Sequence[float]], b: ArrayLike) -> NDArrayF:
    """
    Solve ``A x = b`` by Gauss elimination with relative column maximum pivoting.

    At step k the pivot row p in [k, n) maximises |A[p, k]| / sum_{j>=k} |A[p, j]|.
    Raises SingularMatrixError if a candidate row has a zero band sum or the
    pivot is zero.
    """
    a = _as_matrix(A)
    n = a.shape[0]
    if a.shape != (n, n):
        raise ValueError("A must be square")
    rhs = _as_rhs(b, n)

    for k in range(n):
        row_sums = np.abs(a[k:, k:]).sum(axis=1)
        if np.any(row_sums == 0.0):
            raise SingularMatrixError(f"row with zero sum at elimination step {k}")
        ratios = np.abs(a[k:, k]) / row_sums
        p = k + int(np.argmax(ratios))

        if p != k:
            a[[k, p]] = a[[p, k]]
            rhs[[k, p]] = rhs[[p, k]]

        pivot = a[k, k]
        if pivot == 0.0:
            raise SingularMatrixError(f"zero pivot at elimination step {k}")

        a[k, k:] /= pivot
        rhs[k] /= pivot

        factors = a[k + 1:, k].copy()
        a[k + 1:, k:] -= np.outer(factors, a[k, k:])
        rhs[k + 1:] -= factors * rhs[k]

    x = np.zeros(n, dtype=np.float64)
    for i in range(n - 1, -1, -1):
        x[i] = rhs[i] - np.dot(a[i, i + 1:], x[i + 1:])
    return x


# ---------------------------------------------------------------------------
# Three-diagonal systems
# ---------------------------------------------------------------------------

def solve_three_ms(band: ArrayLike | Sequence[Sequence[float]], b: ArrayLike) -> NDArrayF:
    """
    Solve a tridiagonal system given in compact (n, 3) storage.

    Columns are (sub-diagonal, diagonal, super-diagonal); ``band[0, 0]`` and
    ``band[n-1, 2]`` are ignored.
    """
    m = _as_matrix(band, "band")
    n = m.shape[0]
    if m.shape != (n, 3) or n < 1:
        raise ValueError("band must have shape (n, 3) with n >= 1")
    rhs = _as_rhs(b, n)

    sub = m[:, 0].copy()
    diag = m[:, 1]
    sup = m[:, 2].copy()
    sub[0] = 0.0
    sup[-1] = 0.0

    zero = np.flatnonzero(diag == 0.0)
    if zero.size:
        raise SingularMatrixError(f"zero diagonal element in row {int(zero[0])}")

    alpha = np.zeros(n, dtype=np.float64)
    gamma = np.zeros(n, dtype=np.float64)
    alpha[0] = diag[0]
    gamma[0] = sup[0] / alpha[0]
    for i in range(1, n):
        alpha[i] = diag[i] - sub[i] * gamma[i - 1]
        if alpha[i] == 0.0:
            raise SingularMatrixError(f"zero elimination factor in row {i}")
        gamma[i] = sup[i] / alpha[i]

    r = np.zeros(n, dtype=np.float64)
    r[0] = rhs[0] / diag[0]
    for i in range(1, n):
        r[i] = (rhs[i] - sub[i] * r[i - 1]) / alpha[i]

    x = np.zeros(n, dtype=np.float64)
    x[-1] = r[-1]
    for i in range(n - 2, -1, -1):
        x[i] = r[i] - gamma[i] * x[i + 1]
    return x


def solve_three(A: ArrayLike | Sequence[Sequence[float]], b: ArrayLike) -> NDArrayF:
    """Solve a tridiagonal system given as a full (n, n) matrix."""
    return solve_three_ms(band_from_full(A, 3), b)


# ---------------------------------------------------------------------------
# Five-diagonal systems
# ---------------------------------------------------------------------------

def solve_five_ms(band: ArrayLike | Sequence[Sequence[float]], b: ArrayLike) -> NDArrayF:
    """
    Solve a five-diagonal system given in compact (n, 5) storage.

    Columns are (sub2, sub1, diag, super1, super2). The factorisation keeps
    alpha (pivot), beta (reduced sub1), gamma and delta (scaled super1/super2).
    """
    m = _as_matrix(band, "band")
    n = m.shape[0]
    if m.shape != (n, 5) or n < 1:
        raise ValueError("band must have shape (n, 5) with n >= 1")
    rhs = _as_rhs(b, n)

    g = m[:, 0].copy()
    c = m[:, 1].copy()
    d = m[:, 2]
    e = m[:, 3].copy()
    f = m[:, 4].copy()
    g[:2] = 0.0
    c[:1] = 0.0
    e[n - 1:] = 0.0
    f[max(n - 2, 0):] = 0.0

    zero = np.flatnonzero(d == 0.0)
    if zero.size:
        raise SingularMatrixError(f"zero diagonal element in row {int(zero[0])}")

    alpha = np.zeros(n, dtype=np.float64)
    beta = np.zeros(n, dtype=np.float64)
    gamma = np.zeros(n, dtype=np.float64)
    delta = np.zeros(n, dtype=np.float64)

    for i in range(n):
        gamma_2 = gamma[i - 2] if i >= 2 else 0.0
        delta_2 = delta[i - 2] if i >= 2 else 0.0
        gamma_1 = gamma[i - 1] if i >= 1 else 0.0
        delta_1 = delta[i - 1] if i >= 1 else 0.0

        beta[i] = c[i] - g[i] * gamma_2
        alpha[i] = d[i] - g[i] * delta_2 - beta[i] * gamma_1
        if alpha[i] == 0.0:
            raise SingularMatrixError(f"zero elimination factor in row {i}")
        gamma[i] = (e[i] - beta[i] * delta_1) / alpha[i]
        delta[i] = f[i] / alpha[i]

    r = np.zeros(n, dtype=np.float64)
    for i in range(n):
        acc = rhs[i]
        if i >= 1:
            acc -= beta[i] * r[i - 1]
        if i >= 2:
            acc -= g[i] * r[i - 2]
        r[i] = acc / alpha[i]

    x = np.zeros(n, dtype=np.float64)
    x[-1] = r[-1]
    if n >= 2:
        x[-2] = r[-2] - gamma[-2] * x[-1]
    for i in range(n - 3, -1, -1):
        x[i] = r[i] - gamma[i] * x[i + 1] - delta[i] * x[i + 2]
    return x


def solve_five(A: ArrayLike | Sequence[Sequence[float]], b: ArrayLike) -> NDArrayF:
    """Solve a five-diagonal system given as a full (n, n) matrix."""
    return solve_five_ms(band_from_full(A, 5), b)
