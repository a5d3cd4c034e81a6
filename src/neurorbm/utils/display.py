# src/neurorbm/utils/display.py
"""Representación en texto de las unidades y pesos de una capa RBM."""
from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

logger = logging.getLogger(__name__)


def _require(values: Optional[np.ndarray], what: str) -> np.ndarray:
    if values is None:
        raise ValueError(f"{what} no disponible: llama primero a reconstruct()")
    return values


def format_visible_units(rbm) -> str:
    v2_s = _require(rbm.v2_s, "v2_s")
    lines = ["Visible  Value"]
    lines += [f"{i:<8d} {v:g}" for i, v in enumerate(v2_s)]
    return "\n".join(lines)


def format_visible_grid(rbm, matrix: int) -> str:
    """Visibles reconstruidas como cuadrícula matrix x matrix (p.ej. imágenes)."""
    v2_s = _require(rbm.v2_s, "v2_s")
    if matrix * matrix > v2_s.shape[0]:
        raise ValueError(f"matrix={matrix} excede {v2_s.shape[0]} unidades visibles")
    rows = []
    for i in range(matrix):
        row = v2_s[i * matrix:(i + 1) * matrix]
        rows.append(" ".join(f"{v:g}" for v in row))
    return "\n".join(rows)


def format_hidden_units(rbm) -> str:
    h2_s = _require(rbm.h2_s, "h2_s")
    lines = ["Hidden Value"]
    lines += [f"{j:<8d} {h:g}" for j, h in enumerate(h2_s)]
    return "\n".join(lines)


def format_weights(rbm, matrix: Optional[int] = None) -> str:
    """
    Una fila por unidad oculta con sus pesos entrantes. Con ``matrix``, los
    pesos de cada oculta se parten en filas de ``matrix`` columnas.
    """
    lines: List[str] = []
    for j in range(rbm.n_hidden):
        column = rbm.W[:, j]
        if matrix is None:
            lines.append(" ".join(f"{w:g}" for w in column))
            continue
        for start in range(0, column.shape[0], matrix):
            lines.append(" ".join(f"{w:g}" for w in column[start:start + matrix]))
    return "\n".join(lines)


def display(rbm) -> None:
    logger.info("\n%s", format_visible_units(rbm))
    logger.info("\n%s", format_hidden_units(rbm))
