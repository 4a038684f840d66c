# -*- coding: utf-8 -*-
"""
app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- str_enum: helper para mapear enums Python a columnas VARCHAR con CHECK

Autor: Yava
Fecha: 2026-09-03
"""

from __future__ import annotations

from enum import Enum
from typing import Type

from sqlalchemy import Enum as SAEnum
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM de Yava.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ===== HELPER GENÉRICO PARA ENUMS =====
def str_enum(enum_cls: Type[Enum], name: str | None = None) -> SAEnum:
    """
    Devuelve un tipo Enum de SQLAlchemy que persiste el *valor* del enum
    como VARCHAR (sin tipo ENUM nativo), compatible con Postgres y SQLite.

    Uso típico:

        status: Mapped[OrderStatus] = mapped_column(
            str_enum(OrderStatus, name="order_status"),
            nullable=False,
        )
    """
    enum_name = name or enum_cls.__name__.lower()

    def _values(_: object) -> list[str]:
        return [e.value for e in enum_cls]  # type: ignore[arg-type]

    return SAEnum(
        enum_cls,
        name=enum_name,
        native_enum=False,
        create_constraint=True,
        length=32,
        values_callable=_values,
    )


__all__ = ["Base", "NAMING_CONVENTION", "str_enum"]

# Fin del archivo app/shared/database/base.py
