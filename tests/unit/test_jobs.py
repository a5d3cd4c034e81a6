"""
tests/unit/test_jobs.py

Jobs de línea de comandos: inicialización y reconstrucción de una capa.
"""
from __future__ import annotations

import json
import math
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from neurorbm.jobs import cmd_init_rbm, cmd_reconstruct
from neurorbm.models import RBMConfigError
from neurorbm.utils.weights_io import load_layer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_dataset(path: Path, n_rows: int = 20) -> Path:
    rng = np.random.default_rng(0)
    df = pd.DataFrame(
        rng.integers(0, 2, size=(n_rows, 4)), columns=["v0", "v1", "v2", "v3"]
    )
    df["v3"] = 0  # unidad siempre apagada
    df["etiqueta"] = "x"  # columna no numérica, se ignora
    df.to_csv(path, index=False)
    return path


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def test_init_job_saves_layer_and_report(tmp_path: Path, capsys):
    data = _write_dataset(tmp_path / "data.csv")
    out = tmp_path / "layer"

    report = cmd_init_rbm.main(
        ["--in", str(data), "--out-dir", str(out), "--n-hidden", "3", "--seed", "1"]
    )

    assert (out / "weights.bin").exists()
    assert (out / "meta.json").exists()
    assert (out / "report_init.json").exists()
    assert report["params"]["n_visible"] == 4
    assert report["learning_rate"] == 0.1
    assert report["visible_bias_initialized"] is True
    assert math.isfinite(report["free_energy"])

    printed = json.loads(capsys.readouterr().out)
    assert printed["params"]["n_hidden"] == 3

    rbm = load_layer(out)
    assert np.all(np.isfinite(rbm.c))
    assert rbm.c[3] < -9.0


def test_init_job_skips_bias_for_gaussian_visible(tmp_path: Path):
    data = _write_dataset(tmp_path / "data.csv")
    report = cmd_init_rbm.main(
        [
            "--in", str(data), "--out-dir", str(tmp_path / "g"),
            "--visible-unit", "gaussian", "--hidden-unit", "relu",
        ]
    )
    assert report["visible_bias_initialized"] is False
    assert report["learning_rate"] == 1e-5


def test_init_job_rejects_softmax_visible(tmp_path: Path):
    data = _write_dataset(tmp_path / "data.csv")
    with pytest.raises(RBMConfigError):
        cmd_init_rbm.main(
            ["--in", str(data), "--out-dir", str(tmp_path / "s"), "--visible-unit", "softmax"]
        )


def test_reconstruct_job_reports_all_buffers(tmp_path: Path):
    data = _write_dataset(tmp_path / "data.csv")
    out = tmp_path / "layer"
    cmd_init_rbm.main(["--in", str(data), "--out-dir", str(out), "--n-hidden", "3"])

    report = cmd_reconstruct.main(
        [
            "--layer-dir", str(out), "--in", str(data), "--row", "2",
            "--seed", "5", "--grid", "2", "--show-weights",
        ]
    )

    assert report["row"] == 2
    assert len(report["v1"]) == 4
    for key in ("h1_a", "h1_s", "h2_a", "h2_s"):
        assert len(report[key]) == 3, key
    for key in ("v2_a", "v2_s"):
        assert len(report[key]) == 4, key
    assert set(report["h1_s"]).issubset({0.0, 1.0})


def test_reconstruct_job_row_out_of_range(tmp_path: Path):
    data = _write_dataset(tmp_path / "data.csv", n_rows=5)
    out = tmp_path / "layer"
    cmd_init_rbm.main(["--in", str(data), "--out-dir", str(out)])

    with pytest.raises(IndexError, match="fuera de rango"):
        cmd_reconstruct.main(["--layer-dir", str(out), "--in", str(data), "--row", "5"])


@pytest.mark.parametrize("grid", ["0", "-2"])
def test_reconstruct_job_rejects_non_positive_grid(tmp_path: Path, grid, capsys):
    data = _write_dataset(tmp_path / "data.csv")
    out = tmp_path / "layer"
    cmd_init_rbm.main(["--in", str(data), "--out-dir", str(out)])
    capsys.readouterr()

    with pytest.raises(SystemExit) as exc:
        cmd_reconstruct.main(
            [
                "--layer-dir", str(out), "--in", str(data),
                "--grid", grid, "--show-weights",
            ]
        )
    assert exc.value.code == 2
    assert "--grid" in capsys.readouterr().err
