"""
tests/unit/test_config.py

Validación de RBMConfig y del learning rate heurístico.
"""
from __future__ import annotations

import pytest

from neurorbm.models import RBMConfig, RBMConfigError, UnitType, is_relu


@pytest.mark.parametrize("unit", [UnitType.RELU, UnitType.RELU1, UnitType.RELU6])
def test_is_relu_family(unit):
    assert is_relu(unit)


@pytest.mark.parametrize(
    "unit", [UnitType.BINARY, UnitType.GAUSSIAN, UnitType.SOFTMAX, UnitType.EXP]
)
def test_is_relu_rejects_other_units(unit):
    assert not is_relu(unit)


@pytest.mark.parametrize("unit", ["softmax", "exp"])
def test_visible_softmax_exp_rejected(unit):
    with pytest.raises(RBMConfigError, match="no soportadas"):
        RBMConfig(n_visible=3, n_hidden=2, visible_unit=unit)


def test_hidden_gaussian_rejected():
    with pytest.raises(RBMConfigError, match="no soportadas"):
        RBMConfig(n_visible=3, n_hidden=2, hidden_unit="gaussian")


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        RBMConfig(n_visible=0, n_hidden=2)


def test_config_parses_unit_strings():
    cfg = RBMConfig(n_visible=3, n_hidden=2, visible_unit="gaussian", hidden_unit="relu6")
    assert cfg.visible_unit is UnitType.GAUSSIAN
    assert cfg.hidden_unit is UnitType.RELU6
    assert cfg.dbn is False
    assert cfg.seed is None


def test_config_is_frozen():
    cfg = RBMConfig(n_visible=3, n_hidden=2)
    with pytest.raises(ValueError):
        cfg.n_hidden = 5


@pytest.mark.parametrize(
    "visible, hidden, expected",
    [
        ("gaussian", "relu", 1e-5),
        ("gaussian", "relu1", 1e-5),
        ("gaussian", "binary", 1e-3),
        ("binary", "relu6", 1e-3),
        ("relu", "relu", 1e-3),
        ("binary", "binary", 1e-1),
        ("binary", "softmax", 1e-1),
        ("relu", "exp", 1e-1),
    ],
)
def test_default_learning_rate(visible, hidden, expected):
    cfg = RBMConfig(n_visible=3, n_hidden=2, visible_unit=visible, hidden_unit=hidden)
    assert cfg.default_learning_rate() == expected
