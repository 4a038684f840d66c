# -*- coding: utf-8 -*-
"""
app/routes/__init__.py

Ensamblador principal de ruteadores de la API de Yava.

- /health, /health/live
- /api/webhooks/stripe
- /api/businesses/{business_id}/orders/...

Autor: Yava
Fecha: 2026-09-10
"""

from fastapi import APIRouter

from app.modules.orders.routes import router as orders_router
from app.modules.stripe_webhooks.routes import router as stripe_webhooks_router
from .health_routes import router as health_router

router = APIRouter()

# Health check sin prefijo adicional
router.include_router(health_router)

api = APIRouter(prefix="/api")
api.include_router(stripe_webhooks_router)
api.include_router(orders_router)

router.include_router(api)

__all__ = ["router"]

# Fin del archivo app/routes/__init__.py
