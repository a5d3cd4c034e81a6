"""
Reconstruye una fila de un dataset con una capa RBM guardada.

Carga la capa desde un directorio creado por ``cmd_init_rbm`` (o por
:func:`neurorbm.utils.weights_io.save_layer`), ejecuta un paso
arriba-abajo-arriba sobre la fila ``--row`` y registra por log las unidades
visibles y ocultas resultantes. El reporte JSON incluye los seis vectores de
media/muestra.

Uso::

    python -m neurorbm.jobs.cmd_reconstruct --layer-dir capa/ --in datos.csv --row 0
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Optional, Sequence

from neurorbm.jobs.cmd_init_rbm import _load_table, _numeric_matrix
from neurorbm.logging_config import setup_logging
from neurorbm.observability.logging_context import set_run_id
from neurorbm.utils.display import display, format_visible_grid, format_weights
from neurorbm.utils.weights_io import load_layer

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"debe ser un entero >= 1 (recibido {value})")
    return n


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Reconstrucción de una muestra con una capa RBM guardada."
    )
    ap.add_argument("--layer-dir", required=True, help="Directorio con weights.bin y meta.json")
    ap.add_argument("--in", dest="src", required=True, help="Ruta a parquet/csv")
    ap.add_argument("--row", type=int, default=0, help="Índice de la fila a reconstruir")
    ap.add_argument("--seed", type=int, default=None, help="Seed del muestreo")
    ap.add_argument(
        "--grid",
        type=_positive_int,
        default=None,
        help="Si se indica, registra las visibles como cuadrícula grid x grid",
    )
    ap.add_argument("--show-weights", action="store_true", help="Registra también los pesos")
    ap.add_argument("--run-id", default=None, help="Identificador de la corrida para logs")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> dict:
    args = build_parser().parse_args(argv)
    setup_logging()
    set_run_id(args.run_id)

    rbm = load_layer(args.layer_dir, seed=args.seed)
    X = _numeric_matrix(_load_table(args.src))
    if not 0 <= args.row < X.shape[0]:
        raise IndexError(f"--row={args.row} fuera de rango (n_filas={X.shape[0]})")

    rbm.reconstruct(X[args.row])

    display(rbm)
    if args.grid is not None:
        logger.info("\n%s", format_visible_grid(rbm, args.grid))
    if args.show_weights:
        logger.info("\n%s", format_weights(rbm, args.grid))

    report = {
        "layer_dir": args.layer_dir,
        "row": args.row,
        "free_energy": rbm.free_energy(),
        "v1": rbm.v1.tolist(),
        "h1_a": rbm.h1_a.tolist(),
        "h1_s": rbm.h1_s.tolist(),
        "v2_a": rbm.v2_a.tolist(),
        "v2_s": rbm.v2_s.tolist(),
        "h2_a": rbm.h2_a.tolist(),
        "h2_s": rbm.h2_s.tolist(),
    }
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return report


if __name__ == "__main__":
    main()
