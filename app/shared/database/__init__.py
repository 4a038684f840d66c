# -*- coding: utf-8 -*-
"""
app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: Yava
Fecha: 2026-09-03
"""

from __future__ import annotations

from .base import Base, NAMING_CONVENTION, str_enum
from .database import (
    check_database_health,
    dispose_engine,
    get_async_session,
    get_engine,
    get_session_factory,
    init_models,
)

__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "str_enum",
    "get_engine",
    "get_session_factory",
    "get_async_session",
    "init_models",
    "dispose_engine",
    "check_database_health",
]

# Fin del archivo app/shared/database/__init__.py
