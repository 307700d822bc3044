"""Resample a table onto an equidistant grid."""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import numpy as np

from fastrt_core.config import RESAMPLE_METHODS, ResampleConfig, load_config
from fastrt_core.exceptions import NumericsError
from fastrt_core.numerics.integrate import integrate_piecewise
from fastrt_core.numerics.spline import (
    appspl,
    appspl_coeffc,
    linear_coeffc,
    linear_eqd,
    spline,
    spline_coeffc,
)
from fastrt_core.scripts.common import configure_logging, dotlist, read_table, write_table
from fastrt_core.types import SampleSeries

logger = logging.getLogger(__name__)


def run(cfg: ResampleConfig) -> tuple[SampleSeries, Optional[float]]:
    columns = read_table(cfg.input, columns=3)
    x, y = columns[0], columns[1]
    if cfg.method == "appspl":
        w = columns[2] if len(columns) > 2 else np.full(x.size, cfg.weight)
        result = appspl(x, y, w, cfg.start, cfg.step)
    elif cfg.method == "linear":
        result = linear_eqd(x, y, cfg.start, cfg.step)
    else:
        result = spline(x, y, cfg.start, cfg.step)
    logger.info("resampled %d samples to %d (%s)", x.size, result.n, cfg.method)
    write_table(cfg.output, result.x, result.y, header=f"{cfg.method} {cfg.input} start={cfg.start} step={cfg.step}")

    total = None
    if cfg.integrate:
        if cfg.method == "appspl":
            fit = appspl_coeffc(x, y, w)
        elif cfg.method == "linear":
            fit = linear_coeffc(x, y)
        else:
            fit = spline_coeffc(x, y)
        total = integrate_piecewise(fit, float(x[0]), float(x[-1]))
    return result, total


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Resample tabulated data onto an equidistant grid")
    parser.add_argument("input", nargs="?", help="table with x, y and optional weight columns")
    parser.add_argument("-o", "--output", help="output file")
    parser.add_argument("--method", choices=RESAMPLE_METHODS, help="interpolation method")
    parser.add_argument("--start", type=float, help="first output abscissa")
    parser.add_argument("--step", type=float, help="output step")
    parser.add_argument("--weight", type=float, help="constant appspl weight")
    parser.add_argument("--integrate", action="store_true", default=None, help="print the integral of the fit")
    parser.add_argument("-c", "--config", help="YAML config file")
    parser.add_argument("--set", action="append", default=[], metavar="KEY=VALUE", help="config override")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    overrides = dotlist(
        input=args.input,
        output=args.output,
        method=args.method,
        start=args.start,
        step=args.step,
        weight=args.weight,
        integrate=args.integrate,
    )
    cfg = load_config(ResampleConfig, args.config, args.set + overrides)
    try:
        _, total = run(cfg)
    except NumericsError as exc:
        logger.error("resampling failed: %s", exc)
        return 1
    if total is not None:
        print(f"integral: {total:.10g}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
