# src/neurorbm/models/activation.py
"""
Activación estocástica de unidades RBM.

Cada regla transforma la pre-activación lineal ``x`` en un par
(media, muestra):

    - la media (probabilidad de activación) es determinista dada ``x``;
    - la muestra usa el generador de la capa y alimenta el siguiente paso de Gibbs.

CD usa la media para las estadísticas del gradiente y la muestra para la
transición de la cadena, por eso se devuelven siempre ambas.

Las funciones aceptan un vector (n,) o un batch (m, n); la media y la
muestra conservan la forma de la pre-activación.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .errors import UnsupportedUnitError
from .unit_types import UnitType
from .utils_boltzmann import DTYPE, bernoulli_sample, check_finite, check_vector, sigmoid

__all__ = ["activate_hidden", "activate_visible", "HIDDEN_RULES", "VISIBLE_RULES"]

Rule = Callable[[np.ndarray, np.random.Generator], Tuple[np.ndarray, np.ndarray]]


# ---- Reglas por tipo de unidad ----
def _binary(x: np.ndarray, rng: np.random.Generator):
    mean = sigmoid(x)
    return mean, bernoulli_sample(mean, rng)


def _exp(x: np.ndarray, rng: np.random.Generator):
    with np.errstate(over="ignore"):
        mean = np.exp(x)
    return mean, bernoulli_sample(mean, rng)


def _gaussian(x: np.ndarray, rng: np.random.Generator):
    mean = x.copy()
    return mean, x + rng.normal(0.0, 1.0, size=x.shape)


def _relu(x: np.ndarray, rng: np.random.Generator):
    # La desviación del ruido es la sigmoide de la propia pre-activación
    mean = np.maximum(0.0, x)
    noise = rng.normal(0.0, sigmoid(x))
    return mean, np.maximum(0.0, x + noise)


def _capped_relu(limit: float) -> Rule:
    def rule(x: np.ndarray, rng: np.random.Generator):
        mean = np.clip(x, 0.0, limit)
        noisy = np.clip(x + rng.normal(0.0, 1.0, size=x.shape), 0.0, limit)
        # Unidades saturadas no reciben ruido
        saturated = (mean == 0.0) | (mean == limit)
        return mean, np.where(saturated, mean, noisy)

    rule.__name__ = f"_relu{int(limit)}"
    return rule


def _softmax(x: np.ndarray, rng: np.random.Generator):
    """
    Softmax sobre la última dimensión. La "muestra" es one-hot en el arg-max
    de la media (primer índice en caso de empate), no un sorteo categórico.
    """
    shifted = x - np.max(x, axis=-1, keepdims=True)
    e = np.exp(shifted)
    mean = e / np.sum(e, axis=-1, keepdims=True)

    winner = np.argmax(mean, axis=-1)
    sample = np.zeros_like(mean)
    np.put_along_axis(sample, np.expand_dims(winner, -1), 1.0, axis=-1)
    return mean, sample


HIDDEN_RULES: Dict[UnitType, Rule] = {
    UnitType.BINARY: _binary,
    UnitType.EXP: _exp,
    UnitType.RELU: _relu,
    UnitType.RELU1: _capped_relu(1.0),
    UnitType.RELU6: _capped_relu(6.0),
    UnitType.SOFTMAX: _softmax,
}

VISIBLE_RULES: Dict[UnitType, Rule] = {
    UnitType.BINARY: _binary,
    UnitType.GAUSSIAN: _gaussian,
    UnitType.RELU: _relu,
}


def _apply(
    rules: Dict[UnitType, Rule],
    unit: UnitType,
    x: np.ndarray,
    rng: np.random.Generator,
    side: str,
) -> Tuple[np.ndarray, np.ndarray]:
    rule = rules.get(unit)
    if rule is None:
        raise UnsupportedUnitError(f"Ruta inválida: unidades {side} '{unit}'")

    check_finite(x, f"pre-activación {side}")
    mean, sample = rule(x, rng)
    check_finite(mean, f"media {side}")
    check_finite(sample, f"muestra {side}")
    return mean.astype(DTYPE, copy=False), sample.astype(DTYPE, copy=False)


# ---- API pública ----
def activate_hidden(
    v_a: np.ndarray,
    v_s: Optional[np.ndarray],
    W: np.ndarray,
    b: np.ndarray,
    hidden_unit: UnitType,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Calcula (h_a, h_s) a partir de las visibles.

    Solo la media visible ``v_a`` entra en la parte lineal
    ``x = b + v_a @ W``; ``v_s`` se acepta por simetría con
    :func:`activate_visible` y se valida pero no se consulta.
    """
    n_visible = W.shape[0]
    v_a = check_vector(v_a, n_visible, "v_a")
    if v_s is not None:
        check_vector(v_s, n_visible, "v_s")

    s = v_a @ W
    check_finite(s, "suma ponderada oculta")
    return _apply(HIDDEN_RULES, hidden_unit, b + s, rng, "ocultas")


def activate_visible(
    h_a: Optional[np.ndarray],
    h_s: np.ndarray,
    W: np.ndarray,
    c: np.ndarray,
    visible_unit: UnitType,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Calcula (v_a, v_s) a partir de las ocultas.

    La parte lineal usa la muestra oculta: ``x = c + h_s @ W.T``.
    """
    n_hidden = W.shape[1]
    h_s = check_vector(h_s, n_hidden, "h_s")
    if h_a is not None:
        check_vector(h_a, n_hidden, "h_a")

    s = h_s @ W.T
    check_finite(s, "suma ponderada visible")
    return _apply(VISIBLE_RULES, visible_unit, c + s, rng, "visibles")
