# src/neurorbm/logging_config.py
import logging
import logging.config
import os

from neurorbm.observability.logging_context import install_logrecord_factory

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "run_id": {
            "()": "neurorbm.observability.logging_filters.RunIdLogFilter"
        }
    },
    "formatters": {
        "default": {
            # Incluimos run_id en todas las líneas
            "format": "%(asctime)s %(levelname)s [run=%(run_id)s] %(name)s: %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "filters": ["run_id"],
            "formatter": "default",
        },
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"]
    },
    "loggers": {
        "neurorbm": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        }
    }
}


def setup_logging(level: str | None = None) -> None:
    """
    Aplica LOGGING e instala la LogRecordFactory que añade run_id a todos
    los registros, incluidos los que no pasan por el handler de consola.
    El nivel del logger 'neurorbm' se puede sobrescribir con el argumento
    o con la variable de entorno NEURORBM_LOG_LEVEL.
    """
    logging.config.dictConfig(LOGGING)
    install_logrecord_factory()
    level = level or os.getenv("NEURORBM_LOG_LEVEL")
    if level:
        logging.getLogger("neurorbm").setLevel(level.upper())
