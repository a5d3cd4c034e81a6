"""
Crea una capa RBM, inicializa su sesgo visible desde un dataset y la guarda.

Resumen de funcionalidad
------------------------

- Lee un archivo de entrada en formato ``.parquet`` o ``.csv``.
- Selecciona únicamente las columnas numéricas (una columna por visible).
- Construye la capa con los tipos de unidad pedidos y la semilla indicada.
- Si las visibles son binarias, inicializa ``c`` con el logit de la
  frecuencia empírica de cada unidad.
- Guarda ``weights.bin`` + ``meta.json`` en ``--out-dir`` y un reporte JSON
  con la energía libre de diagnóstico y el learning rate inicial.

Uso::

    python -m neurorbm.jobs.cmd_init_rbm --in datos.csv --out-dir capa/ --n-hidden 32
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from neurorbm.logging_config import setup_logging
from neurorbm.models.rbm_manual import RestrictedBoltzmannMachine
from neurorbm.models.unit_types import UnitType
from neurorbm.observability.logging_context import set_run_id
from neurorbm.utils.weights_io import save_layer

logger = logging.getLogger(__name__)


def _load_table(path: str) -> pd.DataFrame:
    """Carga una tabla desde disco en formato ``.parquet`` o ``.csv``."""
    if path.lower().endswith(".parquet"):
        return pd.read_parquet(path)
    return pd.read_csv(path)


def _numeric_matrix(df: pd.DataFrame) -> np.ndarray:
    """Columnas numéricas como matriz float64, rellenando ausentes con cero."""
    return (
        df.select_dtypes(include=[np.number])
        .fillna(0.0)
        .to_numpy(dtype=np.float64)
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Inicializa una capa RBM desde un dataset y la guarda en disco."
    )
    ap.add_argument("--in", dest="src", required=True, help="Ruta a parquet/csv")
    ap.add_argument("--out-dir", required=True, help="Directorio de salida de la capa")
    ap.add_argument("--n-hidden", type=int, default=64, help="Número de neuronas ocultas")
    ap.add_argument(
        "--visible-unit",
        choices=[u.value for u in UnitType],
        default=UnitType.BINARY.value,
        help="Tipo de unidad visible",
    )
    ap.add_argument(
        "--hidden-unit",
        choices=[u.value for u in UnitType],
        default=UnitType.BINARY.value,
        help="Tipo de unidad oculta",
    )
    ap.add_argument("--seed", type=int, default=42, help="Seed para reproducibilidad")
    ap.add_argument("--run-id", default=None, help="Identificador de la corrida para logs")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> dict:
    args = build_parser().parse_args(argv)
    setup_logging()
    set_run_id(args.run_id)

    df = _load_table(args.src)
    X = _numeric_matrix(df)

    rbm = RestrictedBoltzmannMachine.from_params(
        n_visible=X.shape[1],
        n_hidden=args.n_hidden,
        visible_unit=args.visible_unit,
        hidden_unit=args.hidden_unit,
        seed=args.seed,
    )

    bias_initialized = rbm.visible_unit == UnitType.BINARY
    if bias_initialized:
        rbm.init_visible_bias(X)
    else:
        logger.info("Sesgo visible sin inicializar: unidades '%s'", rbm.visible_unit.value)

    out_dir = save_layer(rbm, args.out_dir)

    report = {
        "dataset": args.src,
        "layer_dir": str(out_dir),
        "params": {
            "n_visible": rbm.n_visible,
            "n_hidden": rbm.n_hidden,
            "visible_unit": rbm.visible_unit.value,
            "hidden_unit": rbm.hidden_unit.value,
            "seed": args.seed,
        },
        "learning_rate": rbm.learning_rate,
        "visible_bias_initialized": bias_initialized,
        "free_energy": rbm.free_energy(),
    }

    out_path = Path(args.out_dir) / "report_init.json"
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)

    print(json.dumps(report, ensure_ascii=False, indent=2))
    return report


if __name__ == "__main__":
    main()
