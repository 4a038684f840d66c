# -*- coding: utf-8 -*-
"""
app/shared/config/config_loader.py

Selecciona la configuración del entorno indicado por PYTHON_ENV, corre las
reglas de arranque y la deja cacheada para todo el proceso.

Autor: Yava
Fecha: 2026-09-02
"""

import os
from functools import lru_cache
from typing import Dict, Type

from .settings_base import BaseAppSettings
from .settings_dev import DevSettings
from .settings_prod import ProdSettings
from .settings_testing import EnvTestingSettings

_SETTINGS_BY_ENV: Dict[str, Type[BaseAppSettings]] = {
    "production": ProdSettings,
    "test": EnvTestingSettings,
    "development": DevSettings,
}


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """
    Configuración del proceso (singleton). Un PYTHON_ENV desconocido se
    trata como desarrollo.

    Raises:
        ValueError: si falla alguna regla de _security_checks()
    """
    env = os.getenv("PYTHON_ENV", "development").strip().lower()
    settings = _SETTINGS_BY_ENV.get(env, DevSettings)()
    settings._security_checks()
    return settings


__all__ = ["get_settings"]
# Fin del archivo app/shared/config/config_loader.py
