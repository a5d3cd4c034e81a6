# src/neurorbm/models/errors.py
"""
Taxonomía de errores del núcleo RBM.

Todos los fallos son fatales para la operación en curso: no hay reintentos
ni recuperación silenciosa dentro del núcleo.
"""
from __future__ import annotations


class RBMError(Exception):
    """Raíz de los errores de neurorbm."""


class RBMConfigError(RBMError, ValueError):
    """Combinación de tipos de unidad o configuración no soportada."""


class ShapeMismatchError(RBMError, ValueError):
    """El tamaño de la entrada no coincide con las dimensiones de la capa."""


class NumericFaultError(RBMError, FloatingPointError):
    """Un valor intermedio o de salida dejó de ser finito (NaN/inf)."""


class UnsupportedUnitError(RBMError, RuntimeError):
    """Un tipo de unidad llegó a una ruta de activación que no lo admite."""
