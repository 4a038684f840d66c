# -*- coding: utf-8 -*-
"""
app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import get_settings, get_webhook_settings

Autor: Yava
Fecha: 2026-09-02
"""

from __future__ import annotations

from .config_loader import get_settings
from .logging_config import setup_logging
from .settings_base import BaseAppSettings
from .settings_webhooks import WebhookSettings, get_webhook_settings, reset_webhook_settings

__all__ = [
    "BaseAppSettings",
    "WebhookSettings",
    "get_settings",
    "get_webhook_settings",
    "reset_webhook_settings",
    "setup_logging",
]
# Fin del archivo app/shared/config/__init__.py
