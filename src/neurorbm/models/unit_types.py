# src/neurorbm/models/unit_types.py
from __future__ import annotations

from enum import Enum

__all__ = ["UnitType", "is_relu", "VISIBLE_UNITS", "HIDDEN_UNITS"]


class UnitType(str, Enum):
    """Familia estadística de las unidades de una capa."""

    BINARY = "binary"
    GAUSSIAN = "gaussian"
    RELU = "relu"
    RELU1 = "relu1"
    RELU6 = "relu6"
    SOFTMAX = "softmax"
    EXP = "exp"


def is_relu(unit: UnitType) -> bool:
    """True para la familia rectificada (RELU, RELU1, RELU6)."""
    return unit in (UnitType.RELU, UnitType.RELU1, UnitType.RELU6)


# Tipos admitidos en cada lado de la RBM
VISIBLE_UNITS = frozenset({UnitType.BINARY, UnitType.GAUSSIAN, UnitType.RELU})
HIDDEN_UNITS = frozenset(set(UnitType) - {UnitType.GAUSSIAN})
