"""Convolve a spectrum with an instrument response kernel."""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from fastrt_core.config import CONVOLVE_MODES, KERNEL_SHAPES, ConvolveConfig, load_config
from fastrt_core.exceptions import NumericsError
from fastrt_core.numerics.convolve import convolute, int_convolute
from fastrt_core.physics.srf import gaussian_kernel, tabulated_kernel, triangular_kernel
from fastrt_core.scripts.common import configure_logging, dotlist, read_table, write_table
from fastrt_core.types import SampleSeries

logger = logging.getLogger(__name__)


def build_kernel(cfg: ConvolveConfig, spectrum_step: float) -> SampleSeries:
    if cfg.kernel is not None:
        kx, ky = read_table(cfg.kernel)
        return tabulated_kernel(kx, ky)
    step = cfg.step if cfg.step is not None else spectrum_step
    if cfg.shape == "triangular":
        return triangular_kernel(cfg.fwhm, step)
    return gaussian_kernel(cfg.fwhm, step, width=cfg.width)


def run(cfg: ConvolveConfig) -> SampleSeries:
    x, y = read_table(cfg.spectrum)
    spectrum_step = float(x[1] - x[0]) if x.size > 1 else 1.0
    kernel = build_kernel(cfg, spectrum_step)
    logger.info("kernel with %d taps, step %g", kernel.n, kernel.step)
    if cfg.mode == "resample":
        result = SampleSeries.from_arrays(x, int_convolute(x, y, kernel.x, kernel.y))
    else:
        result = convolute(x, y, kernel.x, kernel.y)
    write_table(cfg.output, result.x, result.y, header=f"convolved {cfg.spectrum} ({cfg.mode})")
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Convolve a spectrum with a slit function")
    parser.add_argument("spectrum", nargs="?", help="two-column spectrum file")
    parser.add_argument("-o", "--output", help="output file")
    parser.add_argument("-k", "--kernel", help="tabulated kernel file (x centred on 0)")
    parser.add_argument("--shape", choices=KERNEL_SHAPES, help="shape of a generated kernel")
    parser.add_argument("--fwhm", type=float, help="FWHM of a generated kernel")
    parser.add_argument("--step", type=float, help="step of a generated kernel")
    parser.add_argument("--mode", choices=CONVOLVE_MODES, help="direct or resampling convolution")
    parser.add_argument("-c", "--config", help="YAML config file")
    parser.add_argument("--set", action="append", default=[], metavar="KEY=VALUE", help="config override")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    overrides = dotlist(
        spectrum=args.spectrum,
        output=args.output,
        kernel=args.kernel,
        shape=args.shape,
        fwhm=args.fwhm,
        step=args.step,
        mode=args.mode,
    )
    cfg = load_config(ConvolveConfig, args.config, args.set + overrides)
    try:
        run(cfg)
    except NumericsError as exc:
        logger.error("convolution failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
