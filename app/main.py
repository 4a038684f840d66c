# -*- coding: utf-8 -*-
"""
app/main.py

Punto de entrada del backend de Yava (ingesta de webhooks Stripe -> pedidos).

- Carga de .env antes de leer configuración
- Logging centralizado (plain / pretty / json)
- CORS permisivo para el dashboard
- Middleware JSON para excepciones no manejadas
- Observabilidad Prometheus (/metrics)
- Ciclo de vida: creación de tablas (dev/test) y cierre del engine

Autor: Yava
Fecha: 2026-09-11
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea settings
# En producción se respetan las variables del entorno (override=False)
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_override_env = os.getenv("PYTHON_ENV", "development").strip().lower() != "production"
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.observability.prom import setup_observability
from app.routes import router as main_router
from app.shared.config import get_settings, setup_logging
from app.shared.database.database import dispose_engine, init_models
from app.shared.middleware import JSONExceptionMiddleware

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    if settings.db_create_tables:
        await init_models()
        logger.info("🗄️ Tablas verificadas (create_all)")
    logger.info("🟢 Backend de Yava iniciado (env=%s)", settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        await dispose_engine()
        logger.info("🔴 Backend de Yava apagado.")


app = FastAPI(
    title="Yava Delivery API",
    description="Ingesta de webhooks Stripe y consulta de pedidos de entrega",
    version=settings.app_version,
    lifespan=lifespan,
)

# El orden real de ejecución de middlewares es inverso al registro:
# CORS se registra al final para ejecutarse primero (outermost).
app.add_middleware(JSONExceptionMiddleware)
setup_observability(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)

app.include_router(main_router)


@app.get("/")
async def root():
    return {"service": "Yava Delivery Backend", "status": "active"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.app_host, port=settings.app_port)

# Fin del archivo app/main.py
