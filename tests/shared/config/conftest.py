# -*- coding: utf-8 -*-
import os

import pytest

from app.shared.config import get_settings, reset_webhook_settings


@pytest.fixture(autouse=True)
def _isolate_env_and_cache(monkeypatch):
    """
    Aísla variables de entorno y limpia los singletons de configuración en cada test.
    """
    # No heredar secretos ni overrides del shell del dev
    for k in list(os.environ.keys()):
        if k.startswith(("DB_", "STRIPE_", "CORS_", "SUPABASE_", "LOG_", "TENANT_", "FALLBACK_", "WEBHOOK_")):
            monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("PYTHON_ENV", "development")

    get_settings.cache_clear()
    reset_webhook_settings()
    yield
    get_settings.cache_clear()
    reset_webhook_settings()
# Fin del archivo tests/shared/config/conftest.py
