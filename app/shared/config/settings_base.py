# -*- coding: utf-8 -*-
"""
app/shared/config/settings_base.py

Configuración común (Pydantic v2) del backend de Yava Delivery.

- Define todas las variables que entiende el servicio; las subclases de
  entorno (settings_dev / settings_testing / settings_prod) solo cambian
  valores por defecto.
- La selección de subclase y el cacheo los hace config_loader.
- Los parámetros propios de la ingesta de Stripe viven aparte en
  settings_webhooks.WebhookSettings.

Autor: Yava
Fecha: 2026-09-02
"""

import logging
from typing import Literal, Optional
from urllib.parse import quote_plus

from pydantic import Field, HttpUrl, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

EnvName = Literal["development", "test", "production"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "pretty", "plain"]

_ASYNC_PG_SCHEME = "postgresql+asyncpg://"


class BaseAppSettings(BaseSettings):
    # ---- Servicio ----
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="Yava Delivery", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")

    # ---- PostgreSQL (Supabase) ----
    # DATABASE_URL tiene prioridad; los DB_* solo se usan para componerla
    db_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="yava", validation_alias="DB_NAME")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_create_tables: bool = Field(
        default=True,
        validation_alias="DB_CREATE_TABLES",
        description="Ejecutar create_all al arrancar (desactivado en producción)",
    )

    # ---- Supabase Auth (alta del negocio por defecto) ----
    supabase_url: Optional[HttpUrl] = Field(default=None, validation_alias="SUPABASE_URL")
    supabase_service_role_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias="SUPABASE_SERVICE_ROLE_KEY",
    )
    supabase_timeout_sec: float = Field(default=10.0, gt=0, validation_alias="SUPABASE_TIMEOUT_SEC")

    # ---- HTTP ----
    allowed_origins: str = Field(
        default="*",
        validation_alias="CORS_ORIGINS",
        description="Orígenes separados por coma o '*'",
    )
    internal_service_token: Optional[SecretStr] = Field(
        default=None,
        validation_alias="APP_SERVICE_TOKEN",
        description="Bearer token para las consultas internas del dashboard",
    )

    # ---- Logging ----
    log_level: LogLevel = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="pretty", validation_alias="LOG_FORMAT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """URL async para SQLAlchemy (asyncpg, o SQLite tal cual en dev/tests)."""
        if self.db_url:
            if self.db_url.startswith("sqlite"):
                return self.db_url
            for scheme in ("postgres://", "postgresql://"):
                if self.db_url.startswith(scheme):
                    return _ASYNC_PG_SCHEME + self.db_url[len(scheme):]
            return self.db_url

        password = quote_plus(self.db_password.get_secret_value())
        return f"{_ASYNC_PG_SCHEME}{self.db_user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    @computed_field  # type: ignore[misc]
    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)

    def get_cors_origins(self) -> list[str]:
        raw = (self.allowed_origins or "").strip()
        if raw in ("", "*"):
            return ["*"]
        origins = (item.strip().strip("'\"") for item in raw.split(","))
        return [o for o in origins if o]

    def _security_checks(self) -> None:
        """
        Reglas de arranque. config_loader la invoca tras instanciar.

        Raises:
            ValueError: configuración insegura en producción.
        """
        if self.is_prod:
            if self.database_url.startswith("sqlite"):
                raise ValueError("DATABASE_URL no puede apuntar a SQLite en producción")
            if not self.internal_service_token:
                raise ValueError("APP_SERVICE_TOKEN es requerido en producción")
            if not self.supabase_configured:
                logger.warning(
                    "supabase_not_configured: el negocio por defecto se creará con identidad local"
                )
        elif not self.supabase_configured:
            logger.info("supabase_not_configured env=%s (identidad local)", self.python_env)


__all__ = ["BaseAppSettings", "EnvName", "LogFormat", "LogLevel"]
# Fin del archivo app/shared/config/settings_base.py
