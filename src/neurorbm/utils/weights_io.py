"""
neurorbm.utils.weights_io
=========================

Persistencia binaria de los parámetros de una capa RBM.

Formato crudo (``store``/``load``)
----------------------------------
Secuencia de arrays sin cabecera ni prefijo de longitud, en orden fijo:

    W (row-major, n_visible * n_hidden), b (n_hidden), c (n_visible)

Cada elemento es un float64 little-endian. El formato NO se describe a sí
mismo: quien lee debe conocer las dimensiones de antemano.

Directorio de capa (``save_layer``/``load_layer``)
--------------------------------------------------
Envoltorio opcional que guarda el formato crudo en ``weights.bin`` junto a un
``meta.json`` con las dimensiones y los tipos de unidad, para que los jobs de
línea de comandos puedan recargar la capa sin conocer su forma.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import BinaryIO, List, Tuple

import numpy as np

from neurorbm.models.errors import ShapeMismatchError

logger = logging.getLogger(__name__)

WIRE_DTYPE = np.dtype("<f8")
SCHEMA_VERSION = 1
WEIGHTS_FILE = "weights.bin"
META_FILE = "meta.json"


def write_arrays(stream: BinaryIO, *arrays: np.ndarray) -> None:
    for arr in arrays:
        stream.write(np.ascontiguousarray(arr, dtype=WIRE_DTYPE).tobytes(order="C"))


def read_arrays(stream: BinaryIO, *shapes: Tuple[int, ...]) -> List[np.ndarray]:
    out: List[np.ndarray] = []
    for shape in shapes:
        count = int(np.prod(shape))
        nbytes = count * WIRE_DTYPE.itemsize
        raw = stream.read(nbytes)
        if len(raw) != nbytes:
            raise ShapeMismatchError(
                f"Datos insuficientes: se esperaban {nbytes} bytes para shape={shape}, "
                f"se leyeron {len(raw)}"
            )
        out.append(np.frombuffer(raw, dtype=WIRE_DTYPE).reshape(shape).astype(np.float64))
    return out


def save_layer(rbm, out_dir: str | Path) -> Path:
    """Guarda ``weights.bin`` + ``meta.json`` en ``out_dir``."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    with (out / WEIGHTS_FILE).open("wb") as f:
        rbm.store(f)

    meta = {
        "schema_version": SCHEMA_VERSION,
        "n_visible": rbm.n_visible,
        "n_hidden": rbm.n_hidden,
        "visible_unit": rbm.visible_unit.value,
        "hidden_unit": rbm.hidden_unit.value,
        "dtype": WIRE_DTYPE.str,
    }
    (out / META_FILE).write_text(json.dumps(meta, indent=2), encoding="utf-8")
    logger.info("Capa RBM guardada en %s", out)
    return out


def load_layer(in_dir: str | Path, seed: int | None = None, dbn: bool = False):
    """Reconstruye una capa desde un directorio creado por :func:`save_layer`."""
    from neurorbm.models.rbm_manual import RestrictedBoltzmannMachine

    src = Path(in_dir)
    meta_path = src / META_FILE
    weights_path = src / WEIGHTS_FILE
    if not meta_path.exists():
        raise FileNotFoundError(f"No existe {META_FILE} en {src}")
    if not weights_path.exists():
        raise FileNotFoundError(f"No existe {WEIGHTS_FILE} en {src}")

    meta = json.loads(meta_path.read_text(encoding="utf-8"))
    rbm = RestrictedBoltzmannMachine.from_params(
        n_visible=int(meta["n_visible"]),
        n_hidden=int(meta["n_hidden"]),
        visible_unit=meta.get("visible_unit", "binary"),
        hidden_unit=meta.get("hidden_unit", "binary"),
        dbn=dbn,
        seed=seed,
    )
    with weights_path.open("rb") as f:
        rbm.load(f)
    return rbm
