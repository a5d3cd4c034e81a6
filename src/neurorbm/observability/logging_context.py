# src/neurorbm/observability/logging_context.py
from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Optional

# Identificador de la corrida de entrenamiento/inferencia en curso
run_id_var: ContextVar[str] = ContextVar("run_id", default="-")


def set_run_id(run_id: Optional[str]) -> None:
    """
    Establece el run_id en el contexto (ContextVar).
    Usar al inicio de cada job o corrida de entrenamiento.
    """
    run_id_var.set((run_id or "").strip() or "-")


def get_run_id() -> str:
    return run_id_var.get()


def clear_run_id() -> None:
    """Restablece el run_id a '-'."""
    run_id_var.set("-")


def install_logrecord_factory() -> None:
    """
    Instala una LogRecordFactory que inyecta 'run_id' en cada LogRecord
    sin sobrescribir un valor ya presente (p.ej. pasado vía extra=...).
    Llamarla varias veces no encadena fábricas.
    """
    old_factory = logging.getLogRecordFactory()
    if getattr(old_factory, "_neurorbm_run_id", False):
        return

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)

        current = record.__dict__.get("run_id")
        if not current or current == "-":
            record.__dict__["run_id"] = run_id_var.get() or "-"

        return record

    record_factory._neurorbm_run_id = True
    logging.setLogRecordFactory(record_factory)
