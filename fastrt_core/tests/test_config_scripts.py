"""Tests for configuration loading and the command line drivers."""
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from fastrt_core.config import ConvolveConfig, ResampleConfig, load_config
from fastrt_core.scripts import convolve, resample


def test_load_config_precedence(tmp_path: Path) -> None:
    path = tmp_path / "convolve.yaml"
    path.write_text("spectrum: a.dat\nfwhm: 2.5\nmode: resample\n")
    cfg = load_config(ConvolveConfig, path, ["fwhm=3.0"])
    assert isinstance(cfg, ConvolveConfig)
    assert cfg.spectrum == "a.dat"
    assert cfg.mode == "resample"
    assert cfg.fwhm == 3.0
    assert cfg.kernel is None


def test_config_validation() -> None:
    with pytest.raises(ValueError):
        ConvolveConfig(spectrum="a.dat", mode="fft")
    with pytest.raises(ValueError):
        ResampleConfig(input="a.dat", step=0.0)


def test_convolve_cli(tmp_path: Path) -> None:
    spectrum = tmp_path / "spectrum.dat"
    output = tmp_path / "out.dat"
    x = np.arange(20) * 0.5
    np.savetxt(spectrum, np.column_stack([x, np.full(x.size, 2.0)]), header="x y")
    assert convolve.main([str(spectrum), "-o", str(output), "--fwhm", "1.0"]) == 0
    data = np.loadtxt(output)
    assert np.allclose(data[:, 0], x)
    assert np.allclose(data[:, 1], 2.0)


def test_convolve_cli_reports_failure(tmp_path: Path) -> None:
    spectrum = tmp_path / "spectrum.dat"
    np.savetxt(spectrum, np.column_stack([[0.0, 1.0, 3.0, 4.0], [1.0, 1.0, 1.0, 1.0]]))
    assert convolve.main([str(spectrum), "-o", str(tmp_path / "out.dat")]) == 1


def test_resample_cli(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    table = tmp_path / "table.dat"
    output = tmp_path / "resampled.dat"
    x = np.array([0.0, 0.5, 1.5, 3.0, 4.0])
    np.savetxt(table, np.column_stack([x, 2.0 * x + 1.0]))
    status = resample.main([str(table), "-o", str(output), "--method", "linear", "--integrate"])
    assert status == 0
    data = np.loadtxt(output)
    assert np.allclose(data[:, 0], [0.0, 1.0, 2.0, 3.0, 4.0])
    assert np.allclose(data[:, 1], [1.0, 3.0, 5.0, 7.0, 9.0])
    assert "integral: 20" in capsys.readouterr().out
