"""
Paquete de observabilidad.
Exporta helpers para inyectar el run_id en los logs.
"""

from .logging_context import set_run_id, get_run_id, clear_run_id, install_logrecord_factory
from .logging_filters import RunIdLogFilter

__all__ = [
    "set_run_id",
    "get_run_id",
    "clear_run_id",
    "install_logrecord_factory",
    "RunIdLogFilter",
]
