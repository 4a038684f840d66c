# -*- coding: utf-8 -*-
"""
app/shared/config/settings_webhooks.py

Configuración de la ingesta de webhooks de Stripe para Yava.

Descripción:
    Centraliza el secreto de firma global (fallback), la política de
    resolución de negocios, los datos del negocio por defecto y los
    feature flags de la ingesta de pedidos.

Autor: Yava
Fecha: 2026-09-03
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


TenantPolicyName = Literal["reject", "fallback", "auto_provision"]


class WebhookSettings(BaseSettings):
    """Configuración de la ingesta de webhooks Stripe."""

    # =========================================================================
    # STRIPE
    # =========================================================================

    stripe_secret_key: Optional[str] = Field(
        default=None,
        validation_alias="STRIPE_SECRET_KEY",
        description="Stripe secret key (sk_live_... o sk_test_...) para listar line items y clientes",
    )

    stripe_webhook_secret: Optional[str] = Field(
        default=None,
        validation_alias="STRIPE_WEBHOOK_SECRET",
        description="Signing secret global usado cuando el token de ruteo no identifica un negocio",
    )

    stripe_webhook_tolerance_seconds: int = Field(
        default=300,
        ge=1,
        validation_alias="STRIPE_WEBHOOK_TOLERANCE_SEC",
        description="Ventana de tolerancia (s) para el timestamp de la firma",
    )

    stripe_line_items_limit: int = Field(
        default=100,
        ge=1,
        le=100,
        validation_alias="STRIPE_LINE_ITEMS_LIMIT",
        description="Máximo de line items solicitados por checkout session",
    )

    # =========================================================================
    # NEGOCIOS (TENANTS)
    # =========================================================================

    tenant_policy: TenantPolicyName = Field(
        default="auto_provision",
        validation_alias="TENANT_POLICY",
        description="reject | fallback | auto_provision",
    )

    fallback_business_name: str = Field(
        default="Negocio por Defecto (Stripe)",
        validation_alias="FALLBACK_BUSINESS_NAME",
    )

    fallback_business_email: str = Field(
        default="stripe-default@yava.com",
        validation_alias="FALLBACK_BUSINESS_EMAIL",
    )

    # =========================================================================
    # PEDIDOS
    # =========================================================================

    subscription_placeholder_enabled: bool = Field(
        default=True,
        validation_alias="STRIPE_SUBSCRIPTION_PLACEHOLDER",
        description="Crear pedido placeholder al iniciar una suscripción",
    )

    default_delivery_hours: int = Field(
        default=24,
        ge=0,
        validation_alias="DEFAULT_DELIVERY_HOURS",
        description="Horas a sumar a 'ahora' cuando el checkout no trae delivery_time",
    )

    idempotency_enabled: bool = Field(
        default=False,
        validation_alias="WEBHOOK_IDEMPOTENCY_ENABLED",
        description="Registrar eventos procesados y descartar reentregas",
    )

    @field_validator("stripe_webhook_secret", "stripe_secret_key", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_webhook_settings: Optional[WebhookSettings] = None


def get_webhook_settings() -> WebhookSettings:
    """
    Obtiene la instancia global de configuración de webhooks.

    Returns:
        WebhookSettings: Configuración de la ingesta
    """
    global _webhook_settings
    if _webhook_settings is None:
        _webhook_settings = WebhookSettings()
    return _webhook_settings


def reset_webhook_settings() -> None:
    """Descarta el singleton (útil en tests tras cambiar variables de entorno)."""
    global _webhook_settings
    _webhook_settings = None


__all__ = [
    "TenantPolicyName",
    "WebhookSettings",
    "get_webhook_settings",
    "reset_webhook_settings",
]
# Fin del archivo app/shared/config/settings_webhooks.py
