"""Structured configuration for the command line drivers."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Type, TypeVar

from omegaconf import MISSING, OmegaConf

__all__ = ["ConvolveConfig", "ResampleConfig", "load_config"]

T = TypeVar("T")

KERNEL_SHAPES = ("gaussian", "triangular")
CONVOLVE_MODES = ("direct", "resample")
RESAMPLE_METHODS = ("spline", "linear", "appspl")


@dataclass
class ConvolveConfig:
    """Options for ``fastrt-convolve``."""

    spectrum: str = MISSING
    output: str = "convolved.dat"
    # tabulated kernel file; when unset a kernel is generated from ``fwhm``
    kernel: Optional[str] = None
    shape: str = "gaussian"
    fwhm: float = 1.0
    width: float = 3.0
    # kernel step of a generated kernel; defaults to the spectrum step
    step: Optional[float] = None
    mode: str = "direct"

    def __post_init__(self) -> None:
        if self.shape not in KERNEL_SHAPES:
            raise ValueError(f"shape must be one of {KERNEL_SHAPES}, got {self.shape!r}")
        if self.mode not in CONVOLVE_MODES:
            raise ValueError(f"mode must be one of {CONVOLVE_MODES}, got {self.mode!r}")
        if self.fwhm <= 0.0:
            raise ValueError("fwhm must be positive")
        if self.step is not None and self.step <= 0.0:
            raise ValueError("step must be positive")


@dataclass
class ResampleConfig:
    """Options for ``fastrt-resample``."""

    input: str = MISSING
    output: str = "resampled.dat"
    method: str = "spline"
    start: float = 0.0
    step: float = 1.0
    # constant weight for ``appspl`` when the table has no third column
    weight: float = 1.0
    integrate: bool = False

    def __post_init__(self) -> None:
        if self.method not in RESAMPLE_METHODS:
            raise ValueError(f"method must be one of {RESAMPLE_METHODS}, got {self.method!r}")
        if self.step <= 0.0:
            raise ValueError("step must be positive")
        if self.weight < 0.0:
            raise ValueError("weight must be non-negative")


def load_config(
    schema: Type[T],
    path: Optional[str | Path] = None,
    overrides: Sequence[str] = (),
) -> T:
    """
    Build a ``schema`` instance from its defaults, an optional YAML file and
    ``key=value`` overrides, in that order of precedence.
    """
    cfg = OmegaConf.structured(schema)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(str(path)))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
    return OmegaConf.to_object(cfg)
