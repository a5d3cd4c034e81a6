# src/neurorbm/models/utils_boltzmann.py
from __future__ import annotations

import logging

import numpy as np

from .errors import NumericFaultError, ShapeMismatchError

__all__ = [
    "BIAS_EPS",
    "DTYPE",
    "sigmoid",
    "bernoulli_sample",
    "check_finite",
    "check_vector",
    "check_numeric_matrix",
]

logger = logging.getLogger(__name__)

# Evita log(0) al inicializar sesgos visibles desde frecuencias empíricas
BIAS_EPS = 1e-4
DTYPE = np.float64


def sigmoid(x: np.ndarray) -> np.ndarray:
    """Sigmoide logística; exp(-x) puede desbordar a inf sin afectar el resultado."""
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-np.asarray(x, dtype=DTYPE)))


def bernoulli_sample(p: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Muestreo por umbral: 1 donde p supera una uniforme U(0,1), 0 en otro caso."""
    return (p > rng.random(np.shape(p))).astype(DTYPE)


def check_finite(x: np.ndarray, name: str) -> None:
    """Falla con NumericFaultError si ``x`` contiene NaN o inf."""
    if not np.all(np.isfinite(x)):
        bad = int(np.size(x) - np.count_nonzero(np.isfinite(x)))
        logger.error("Valor no finito en %s (%d elementos)", name, bad)
        raise NumericFaultError(f"{name} contiene inf/NaN ({bad} elementos)")


def check_vector(x, size: int, name: str = "x") -> np.ndarray:
    """
    Convierte ``x`` a float64 y valida que su última dimensión sea ``size``.
    Acepta un vector (size,) o un batch (n, size).
    """
    arr = np.asarray(x, dtype=DTYPE)
    if arr.ndim not in (1, 2) or arr.shape[-1] != size:
        raise ShapeMismatchError(
            f"{name} debe tener {size} columnas (shape recibido={arr.shape})"
        )
    return arr


def check_numeric_matrix(X, name: str = "X") -> np.ndarray:
    """Valida que el array sea 2D, no vacío y sin NaNs."""
    arr = np.asarray(X, dtype=DTYPE)
    if arr.ndim != 2:
        raise ShapeMismatchError(f"{name} debe ser 2D (shape=(n_samples, n_features))")
    if arr.shape[0] == 0:
        raise ShapeMismatchError(f"{name} no puede estar vacío")
    check_finite(arr, name)
    return arr
