# -*- coding: utf-8 -*-
"""
app/shared/config/settings_testing.py

Valores por defecto para PRUEBAS (PYTHON_ENV=test): SQLite en memoria,
logging silencioso y token interno fijo.

Autor: Yava
Fecha: 2026-09-02
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings, LogFormat, LogLevel


class EnvTestingSettings(BaseAppSettings):
    python_env: str = "test"

    log_level: LogLevel = Field(default="WARNING", validation_alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="plain", validation_alias="LOG_FORMAT")

    db_url: Optional[str] = Field(default="sqlite+aiosqlite:///:memory:", validation_alias="DATABASE_URL")

    internal_service_token: Optional[SecretStr] = Field(
        default=SecretStr("test-service-token"),
        validation_alias="APP_SERVICE_TOKEN",
    )

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo app/shared/config/settings_testing.py
