# -*- coding: utf-8 -*-
"""
app/shared/config/logging_config.py

Logging del proceso vía logging.config.dictConfig.

- plain:  consola compacta (desarrollo / tests)
- pretty: con timestamp
- json:   python-json-logger, una línea JSON por registro (producción)

Los mensajes usan estilo "evento clave=valor" para que sean filtrables
tanto en texto como en JSON.

Autor: Yava
Fecha: 2026-09-02
"""

import logging.config
from typing import Literal

# Librerías ruidosas que se limitan a WARNING salvo en DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore", "stripe", "sqlalchemy.engine", "aiosqlite")

_FORMATTERS = {
    "plain": {
        "format": "%(levelname)s [%(name)s]: %(message)s",
    },
    "pretty": {
        "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    },
    "json": {
        "()": "pythonjsonlogger.json.JsonFormatter",
        "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        "rename_fields": {"levelname": "level", "asctime": "ts"},
    },
}


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
) -> None:
    """
    Configura el logger raíz con un único handler de consola.

    Ejemplos:
        >>> setup_logging("DEBUG", "plain")
        >>> setup_logging("INFO", "json")
    """
    level = level.upper()
    formatter = fmt if fmt in _FORMATTERS else "plain"
    library_level = "DEBUG" if level == "DEBUG" else "WARNING"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {formatter: _FORMATTERS[formatter]},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {name: {"level": library_level} for name in _NOISY_LOGGERS},
            "root": {"handlers": ["console"], "level": level},
        }
    )


__all__ = ["setup_logging"]
# Fin del archivo app/shared/config/logging_config.py
