"""Shared plumbing of the command line drivers."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from fastrt_core.types import NDArrayF

__all__ = ["configure_logging", "read_table", "write_table", "dotlist"]


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def read_table(path: str | Path, columns: int = 2) -> Tuple[NDArrayF, ...]:
    """
    Read whitespace separated numeric columns; ``#`` and ``%`` start comments.

    Returns the first ``columns`` columns, or as many as the file has when it
    has fewer (at least two are required).
    """
    data = np.loadtxt(path, comments=("#", "%"), ndmin=2, dtype=np.float64)
    if data.shape[1] < 2:
        raise ValueError(f"{path}: expected at least two columns, found {data.shape[1]}")
    return tuple(data[:, i].copy() for i in range(min(columns, data.shape[1])))


def write_table(path: str | Path, *columns: NDArrayF, header: str = "") -> None:
    np.savetxt(path, np.column_stack(columns), fmt="%.10e", header=header)


def dotlist(**values: Optional[object]) -> list[str]:
    """``key=value`` overrides for the options that were given on the command line."""
    return [f"{key}={value}" for key, value in values.items() if value is not None]
