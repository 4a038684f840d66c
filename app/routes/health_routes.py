# -*- coding: utf-8 -*-
"""
app/routes/health_routes.py

Health checks del backend de Yava.

Autor: Yava
Fecha: 2026-09-10
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.shared.config import get_settings
from app.shared.database.database import check_database_health

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Health check del backend",
    description="Estado del servicio y conectividad a la base de datos.",
)
async def health_check() -> dict:
    settings = get_settings()

    db_ok = await check_database_health(timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.python_env,
        "database": {
            "reachable": db_ok,
        },
        "service": {
            "name": "yava-delivery-backend",
            "version": settings.app_version,
        },
    }


@router.get("/health/live")
async def health_live() -> dict:
    return {"status": "alive"}

# Fin del archivo app/routes/health_routes.py
