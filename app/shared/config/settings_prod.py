# -*- coding: utf-8 -*-
"""
app/shared/config/settings_prod.py

Valores por defecto para PRODUCCIÓN: solo variables de entorno (sin .env),
logs JSON y esquema gestionado por migraciones de Supabase.

Autor: Yava
Fecha: 2026-09-02
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings, EnvName, LogFormat, LogLevel


class ProdSettings(BaseAppSettings):
    python_env: EnvName = "production"

    log_level: LogLevel = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="json", validation_alias="LOG_FORMAT")

    db_create_tables: bool = Field(default=False, validation_alias="DB_CREATE_TABLES")

    model_config = SettingsConfigDict(
        env_file=None,
        extra="ignore",
    )


__all__ = ["ProdSettings"]
# Fin del archivo app/shared/config/settings_prod.py
