"""
tests/unit/test_display.py

Representación en texto de unidades y pesos.
"""
from __future__ import annotations

import logging

import numpy as np
import pytest

from neurorbm.utils.display import (
    display,
    format_hidden_units,
    format_visible_grid,
    format_visible_units,
    format_weights,
)


def test_format_requires_reconstruction(zero_rbm):
    with pytest.raises(ValueError, match="reconstruct"):
        format_visible_units(zero_rbm)


def test_format_units_after_reconstruction(zero_rbm):
    zero_rbm.reconstruct(np.array([1.0, 0.0, 1.0, 0.0]))

    visible = format_visible_units(zero_rbm).splitlines()
    hidden = format_hidden_units(zero_rbm).splitlines()

    assert visible[0] == "Visible  Value"
    assert len(visible) == 5
    assert visible[1].split()[0] == "0"
    assert visible[1].split()[1] in {"0", "1"}
    assert hidden[0] == "Hidden Value"
    assert len(hidden) == 3


def test_format_visible_grid(zero_rbm):
    zero_rbm.reconstruct(np.zeros(4))
    rows = format_visible_grid(zero_rbm, 2).splitlines()
    assert len(rows) == 2
    assert all(len(r.split()) == 2 for r in rows)

    with pytest.raises(ValueError, match="excede"):
        format_visible_grid(zero_rbm, 3)


def test_format_weights(zero_rbm):
    zero_rbm.W[...] = np.arange(8, dtype=np.float64).reshape(4, 2)

    lines = format_weights(zero_rbm).splitlines()
    assert lines == ["0 2 4 6", "1 3 5 7"]

    blocks = format_weights(zero_rbm, matrix=2).splitlines()
    assert blocks == ["0 2", "4 6", "1 3", "5 7"]


def test_display_logs_units(zero_rbm, caplog):
    zero_rbm.reconstruct(np.ones(4))
    with caplog.at_level(logging.INFO, logger="neurorbm.utils.display"):
        display(zero_rbm)
    assert "Visible  Value" in caplog.text
    assert "Hidden Value" in caplog.text
