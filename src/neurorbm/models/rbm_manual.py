# src/neurorbm/models/rbm_manual.py
from __future__ import annotations

import logging
import time
from typing import BinaryIO, Optional

import numpy as np

from .activation import activate_hidden, activate_visible
from .config import RBMConfig
from .errors import RBMConfigError, ShapeMismatchError
from .gradient_bank import GradientBank, GradientContext
from .unit_types import UnitType
from .utils_boltzmann import (
    BIAS_EPS,
    DTYPE,
    check_finite,
    check_numeric_matrix,
    check_vector,
)
from ..utils import weights_io

logger = logging.getLogger(__name__)


class RestrictedBoltzmannMachine:
    """
    Capa RBM con unidades visibles/ocultas de tipo configurable.

    Interfaz:
      - activate_hidden(v_a, v_s) -> (h_a, h_s)
      - activate_visible(h_a, h_s) -> (v_a, v_s)
      - reconstruct(items)         -> rellena v1, h1_*, v2_*, h2_*
      - free_energy()              -> escalar de diagnóstico
      - init_visible_bias(X)       -> c_i = logit(frecuencia empírica)
      - store(stream) / load(stream)
      - gradient_context()         -> vista de gradiente (solo config.dbn)

    Estado:
      W : (n_visible, n_hidden) pesos, init 0.1 * N(0, 1)
      b : (n_hidden,) sesgo oculto, init 0
      c : (n_visible,) sesgo visible, init 0

    La capa es la única dueña de W/b/c y de su generador ``rng``; no hay
    locking interno (un solo escritor a la vez).
    """

    def __init__(self, config: RBMConfig):
        self.config = config
        self.n_visible = config.n_visible
        self.n_hidden = config.n_hidden
        self.visible_unit = config.visible_unit
        self.hidden_unit = config.hidden_unit

        self.rng = np.random.default_rng(config.seed)
        self.W = self.rng.normal(0.0, 1.0, size=(self.n_visible, self.n_hidden)) * 0.1
        self.b = np.zeros(self.n_hidden, dtype=DTYPE)
        self.c = np.zeros(self.n_visible, dtype=DTYPE)

        self.learning_rate = config.default_learning_rate()

        # Buffers de reconstrucción (se rellenan en reconstruct)
        self.v1: Optional[np.ndarray] = None
        self.h1_a: Optional[np.ndarray] = None
        self.h1_s: Optional[np.ndarray] = None
        self.v2_a: Optional[np.ndarray] = None
        self.v2_s: Optional[np.ndarray] = None
        self.h2_a: Optional[np.ndarray] = None
        self.h2_s: Optional[np.ndarray] = None

        self.bank: Optional[GradientBank] = (
            GradientBank(self.n_visible, self.n_hidden) if config.dbn else None
        )

    @classmethod
    def from_params(
        cls,
        n_visible: int,
        n_hidden: int,
        visible_unit: UnitType | str = UnitType.BINARY,
        hidden_unit: UnitType | str = UnitType.BINARY,
        dbn: bool = False,
        seed: Optional[int] = None,
    ) -> "RestrictedBoltzmannMachine":
        config = RBMConfig(
            n_visible=n_visible,
            n_hidden=n_hidden,
            visible_unit=visible_unit,
            hidden_unit=hidden_unit,
            dbn=dbn,
            seed=seed,
        )
        return cls(config)

    # ---- Activaciones ----
    def activate_hidden(self, v_a: np.ndarray, v_s: Optional[np.ndarray] = None):
        return activate_hidden(v_a, v_s, self.W, self.b, self.hidden_unit, self.rng)

    def activate_visible(self, h_a: Optional[np.ndarray], h_s: np.ndarray):
        return activate_visible(h_a, h_s, self.W, self.c, self.visible_unit, self.rng)

    # ---- Inicialización ----
    def init_visible_bias(self, X: np.ndarray) -> None:
        """
        Inicializa c_i = log(p_i / (1 - p_i)) donde p_i es la fracción de
        ejemplos con la visible i exactamente igual a 1 (más BIAS_EPS).
        """
        X = check_numeric_matrix(X, "X")
        check_vector(X, self.n_visible, "X")

        p = np.count_nonzero(X == 1.0, axis=0) / X.shape[0] + BIAS_EPS
        with np.errstate(divide="ignore", invalid="ignore"):
            c = np.log(p / (1.0 - p))
        check_finite(c, "sesgo visible")

        self.c[:] = c
        logger.debug("Sesgo visible inicializado desde %d ejemplos", X.shape[0])

    # ---- Diagnóstico ----
    def free_energy(self) -> float:
        """
        Indicador relativo: -sum_ij W_ij * b_j * c_i.

        Omite el término log(1 + exp(...)) de la energía libre de una RBM,
        sirve solo para seguir tendencias durante el entrenamiento.
        """
        return -float(self.c @ self.W @ self.b)

    def reconstruct(self, items) -> None:
        """Un paso completo arriba-abajo-arriba a partir de ``items``."""
        v1 = np.asarray(items, dtype=DTYPE)
        if v1.ndim != 1 or v1.shape[0] != self.n_visible:
            raise ShapeMismatchError(
                "El tamaño de la muestra debe coincidir con las unidades visibles "
                f"({v1.shape} != ({self.n_visible},))"
            )

        t0 = time.perf_counter()
        self.v1 = v1.copy()
        self.h1_a, self.h1_s = self.activate_hidden(self.v1, self.v1)
        self.v2_a, self.v2_s = self.activate_visible(self.h1_a, self.h1_s)
        self.h2_a, self.h2_s = self.activate_hidden(self.v2_a, self.v2_s)
        logger.debug("Reconstrucción tomó %.3fms", (time.perf_counter() - t0) * 1000.0)

    # ---- Persistencia ----
    def store(self, stream: BinaryIO) -> None:
        weights_io.write_arrays(stream, self.W, self.b, self.c)

    def load(self, stream: BinaryIO) -> None:
        W, b, c = weights_io.read_arrays(stream, self.W.shape, self.b.shape, self.c.shape)
        self.W[...] = W
        self.b[...] = b
        self.c[...] = c

    # ---- Fine-tuning (DBN) ----
    def gradient_context(self) -> GradientContext:
        if self.bank is None:
            raise RBMConfigError(
                "gradient_context() requiere una capa construida con dbn=True"
            )
        return GradientContext(self)

