# -*- coding: utf-8 -*-
"""
app/shared/database/database.py

SQLAlchemy async (asyncpg en Postgres/Supabase, aiosqlite en tests).

Provee:
- get_engine() / get_session_factory(): construcción perezosa desde settings
- Dependencia FastAPI: get_async_session
- init_models() / dispose_engine()
- check_database_health()

Autor: Yava
Fecha: 2026-09-03
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from app.shared.config.config_loader import get_settings
from app.shared.database.base import Base

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _build_engine(url: str, echo: bool) -> AsyncEngine:
    if url.startswith("sqlite"):
        # SQLite en memoria: una sola conexión compartida para que el esquema persista
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    # Supabase expone PgBouncer: sin pool app-side ni cache de statements
    return create_async_engine(
        url,
        echo=echo,
        poolclass=NullPool,
        connect_args={"statement_cache_size": 0},
    )


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = _build_engine(settings.database_url, settings.db_echo_sql)
        logger.info("[DB] Engine creado (dialect=%s)", _engine.dialect.name)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            expire_on_commit=False,
            class_=AsyncSession,
            autoflush=False,
        )
    return _session_factory


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_models() -> None:
    """Crea las tablas declaradas (desarrollo/tests; en Supabase se usan migraciones SQL)."""
    # Registrar modelos en el metadata antes de create_all
    from app.modules.businesses import models as _business_models  # noqa: F401
    from app.modules.orders import models as _order_models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with get_engine().connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] Health check falló: %s", e)
        return False


__all__ = [
    "get_engine",
    "get_session_factory",
    "get_async_session",
    "init_models",
    "dispose_engine",
    "check_database_health",
]
# Fin del archivo app/shared/database/database.py
