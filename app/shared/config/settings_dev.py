# -*- coding: utf-8 -*-
"""
app/shared/config/settings_dev.py

Valores por defecto para DESARROLLO local: logs DEBUG en texto plano y
tablas creadas al arrancar.

Autor: Yava
Fecha: 2026-09-02
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings, LogFormat, LogLevel


class DevSettings(BaseAppSettings):
    python_env: str = "development"

    log_level: LogLevel = Field(default="DEBUG", validation_alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="plain", validation_alias="LOG_FORMAT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["DevSettings"]

# Fin del archivo app/shared/config/settings_dev.py
