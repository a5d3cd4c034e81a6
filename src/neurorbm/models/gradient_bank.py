# src/neurorbm/models/gradient_bank.py
"""
Banco de gradientes para el fine-tuning de una capa RBM dentro de una DBN.

El optimizador externo (gradiente conjugado Polak-Ribière con búsqueda
lineal) usa estos buffers entre iteraciones:

    incs / best_incs : incremento del paso actual y del mejor paso conocido
    best             : parámetros del mejor objetivo observado (rollback)
    df0 / df3        : gradiente al inicio de la búsqueda y en el último punto de prueba
    s                : dirección de búsqueda conjugada
    tmp              : parámetros de prueba durante la búsqueda lineal

El gradiente "actual" NO es una copia: el pase de backprop externo escribe
directamente sobre ``W`` y ``b`` de la capa. :class:`GradientContext` hace
explícito ese préstamo (``gr_w is layer.W``).

Si un gradiente, un punto de prueba o un objetivo deja de ser finito se lanza
NumericFaultError y ``best``/``best_incs``/``best_objective`` quedan intactos,
de modo que ``restore_best()`` sigue devolviendo el último estado válido.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from .activation import activate_hidden
from .errors import NumericFaultError, RBMError
from .utils_boltzmann import DTYPE, check_finite, check_numeric_matrix

logger = logging.getLogger(__name__)


class GradientBank:
    """Buffers pareados (pesos, sesgo oculto) que muta el optimizador."""

    def __init__(self, n_visible: int, n_hidden: int):
        self.n_visible = int(n_visible)
        self.n_hidden = int(n_hidden)

        shape_w = (self.n_visible, self.n_hidden)
        shape_b = (self.n_hidden,)

        self.w_incs = np.zeros(shape_w, dtype=DTYPE)
        self.b_incs = np.zeros(shape_b, dtype=DTYPE)
        self.w_best = np.zeros(shape_w, dtype=DTYPE)
        self.b_best = np.zeros(shape_b, dtype=DTYPE)
        self.w_best_incs = np.zeros(shape_w, dtype=DTYPE)
        self.b_best_incs = np.zeros(shape_b, dtype=DTYPE)
        self.w_df0 = np.zeros(shape_w, dtype=DTYPE)
        self.b_df0 = np.zeros(shape_b, dtype=DTYPE)
        self.w_df3 = np.zeros(shape_w, dtype=DTYPE)
        self.b_df3 = np.zeros(shape_b, dtype=DTYPE)
        self.w_s = np.zeros(shape_w, dtype=DTYPE)
        self.b_s = np.zeros(shape_b, dtype=DTYPE)
        self.w_tmp = np.zeros(shape_w, dtype=DTYPE)
        self.b_tmp = np.zeros(shape_b, dtype=DTYPE)

        self.best_objective = math.inf
        self.has_checkpoint = False
        self.has_trial = False

        # Activaciones por muestra del último pase de gradiente
        self.probs_a: List[np.ndarray] = []
        self.probs_s: List[np.ndarray] = []

    def reset(self) -> None:
        for name in (
            "incs", "best", "best_incs", "df0", "df3", "s", "tmp",
        ):
            getattr(self, f"w_{name}").fill(0.0)
            getattr(self, f"b_{name}").fill(0.0)
        self.best_objective = math.inf
        self.has_checkpoint = False
        self.has_trial = False
        self.probs_a.clear()
        self.probs_s.clear()

    @staticmethod
    def _dot(wa, ba, wb, bb) -> float:
        return float(np.sum(wa * wb) + np.sum(ba * bb))

    def slope(self) -> float:
        """Derivada direccional d0 = <df0, s>."""
        return self._dot(self.w_df0, self.b_df0, self.w_s, self.b_s)

    def direction_coefficient(self) -> float:
        """Coeficiente Polak-Ribière: (<df3,df3> - <df0,df3>) / <df0,df0>."""
        d00 = self._dot(self.w_df0, self.b_df0, self.w_df0, self.b_df0)
        if d00 == 0.0:
            return 0.0
        d33 = self._dot(self.w_df3, self.b_df3, self.w_df3, self.b_df3)
        d03 = self._dot(self.w_df0, self.b_df0, self.w_df3, self.b_df3)
        return (d33 - d03) / d00

    def update_direction(self) -> float:
        """
        s <- beta * s - df3 y df0 <- df3, escribiendo sobre los mismos
        buffers. Si la nueva dirección no es de descenso se reinicia a -df0.
        Devuelve la nueva pendiente.
        """
        beta = self.direction_coefficient()
        w_s = beta * self.w_s - self.w_df3
        b_s = beta * self.b_s - self.b_df3
        check_finite(w_s, "dirección de búsqueda (W)")
        check_finite(b_s, "dirección de búsqueda (b)")

        np.copyto(self.w_s, w_s)
        np.copyto(self.b_s, b_s)
        np.copyto(self.w_df0, self.w_df3)
        np.copyto(self.b_df0, self.b_df3)

        d0 = self.slope()
        if d0 >= 0.0:
            np.negative(self.w_df0, out=self.w_s)
            np.negative(self.b_df0, out=self.b_s)
            d0 = -self._dot(self.w_s, self.b_s, self.w_s, self.b_s)
        return d0


class GradientContext:
    """
    Vista de gradiente sobre una capa en modo DBN.

    ``gr_w``/``gr_b`` son el almacenamiento vivo de ``W``/``b`` (sin copia);
    el resto del estado vive en el :class:`GradientBank` de la capa.
    """

    def __init__(self, layer):
        if layer.bank is None:
            raise RBMError("La capa no tiene banco de gradientes (config.dbn=False)")
        self.layer = layer
        self.bank: GradientBank = layer.bank

    @property
    def gr_w(self) -> np.ndarray:
        return self.layer.W

    @property
    def gr_b(self) -> np.ndarray:
        return self.layer.b

    def _live_gradient(self) -> Tuple[np.ndarray, np.ndarray]:
        check_finite(self.gr_w, "gradiente W")
        check_finite(self.gr_b, "gradiente b")
        return self.gr_w, self.gr_b

    # ---- Checkpoint / commit ----
    def checkpoint(self, objective: float) -> None:
        """Guarda los parámetros vivos como mejor estado conocido."""
        if not math.isfinite(objective):
            raise NumericFaultError(f"objetivo no finito: {objective}")
        w, b = self._live_gradient()

        bank = self.bank
        np.copyto(bank.w_best, w)
        np.copyto(bank.b_best, b)
        bank.w_best_incs.fill(0.0)
        bank.b_best_incs.fill(0.0)
        bank.best_objective = float(objective)
        bank.has_checkpoint = True
        bank.has_trial = False
        logger.debug("Checkpoint de capa con objetivo=%.6g", objective)

    def _write_best(self, caller: str) -> None:
        if not self.bank.has_checkpoint:
            raise RBMError(f"{caller}() requiere un checkpoint() previo")
        np.copyto(self.layer.W, self.bank.w_best)
        np.copyto(self.layer.b, self.bank.b_best)

    def commit(self) -> None:
        """Escribe ``best`` sobre ``W``/``b`` al aceptar el paso de la búsqueda."""
        self._write_best("commit")
        logger.debug("Commit de capa con objetivo=%.6g", self.bank.best_objective)

    def restore_best(self) -> None:
        """
        Aborta la búsqueda: descarta el punto de prueba pendiente y devuelve
        ``W``/``b`` al mejor estado conocido.
        """
        self._write_best("restore_best")
        self.bank.has_trial = False
        logger.debug("Búsqueda abortada; restaurado objetivo=%.6g", self.bank.best_objective)

    # ---- Búsqueda lineal ----
    def begin_search(self) -> float:
        """df0 <- gradiente vivo, s <- -df0. Devuelve la pendiente inicial."""
        w, b = self._live_gradient()
        bank = self.bank
        np.copyto(bank.w_df0, w)
        np.copyto(bank.b_df0, b)
        np.negative(bank.w_df0, out=bank.w_s)
        np.negative(bank.b_df0, out=bank.b_s)
        bank.has_trial = False
        return bank.slope()

    def record_trial_gradient(self) -> None:
        """df3 <- gradiente vivo en el punto de prueba."""
        w, b = self._live_gradient()
        np.copyto(self.bank.w_df3, w)
        np.copyto(self.bank.b_df3, b)

    def update_direction(self) -> float:
        return self.bank.update_direction()

    def stage_trial(self, step: float) -> Tuple[np.ndarray, np.ndarray]:
        """incs <- step * s; tmp <- best + incs. Devuelve (w_tmp, b_tmp)."""
        bank = self.bank
        if not bank.has_checkpoint:
            raise RBMError("stage_trial() requiere un checkpoint() previo")
        if not math.isfinite(step):
            raise NumericFaultError(f"paso de búsqueda no finito: {step}")

        w_incs = step * bank.w_s
        b_incs = step * bank.b_s
        w_tmp = bank.w_best + w_incs
        b_tmp = bank.b_best + b_incs
        check_finite(w_tmp, "parámetros de prueba (W)")
        check_finite(b_tmp, "parámetros de prueba (b)")

        np.copyto(bank.w_incs, w_incs)
        np.copyto(bank.b_incs, b_incs)
        np.copyto(bank.w_tmp, w_tmp)
        np.copyto(bank.b_tmp, b_tmp)
        bank.has_trial = True
        return bank.w_tmp, bank.b_tmp

    def accept_trial(self, objective: float) -> bool:
        """Promueve el punto de prueba a ``best`` si mejora el objetivo."""
        if not math.isfinite(objective):
            raise NumericFaultError(f"objetivo no finito en punto de prueba: {objective}")
        bank = self.bank
        if not bank.has_trial:
            raise RBMError("accept_trial() requiere un stage_trial() previo")
        bank.has_trial = False
        if objective >= bank.best_objective:
            return False

        np.copyto(bank.w_best, bank.w_tmp)
        np.copyto(bank.b_best, bank.b_tmp)
        np.copyto(bank.w_best_incs, bank.w_incs)
        np.copyto(bank.b_best_incs, bank.b_incs)
        bank.best_objective = float(objective)
        return True

    # ---- Activaciones ----
    def activate_hidden(
        self,
        v_a: np.ndarray,
        v_s: Optional[np.ndarray] = None,
        temp: bool = False,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Activación oculta con los parámetros vivos o con los de prueba (``temp``)."""
        if temp:
            W, b = self.bank.w_tmp, self.bank.b_tmp
        else:
            W, b = self.gr_w, self.gr_b
        return activate_hidden(v_a, v_s, W, b, self.layer.hidden_unit, self.layer.rng)

    def cache_activations(self, X: np.ndarray, temp: bool = False) -> None:
        """Rellena probs_a/probs_s con la activación oculta de cada muestra de X."""
        X = check_numeric_matrix(X, "X")
        h_a, h_s = self.activate_hidden(X, X, temp=temp)
        self.bank.probs_a = list(h_a)
        self.bank.probs_s = list(h_s)
