# -*- coding: utf-8 -*-
"""
app/shared/__init__.py

Piezas compartidas entre módulos (config, base de datos, middlewares,
integraciones y autenticación de servicio interno).

No inicializa settings en import-time para evitar efectos colaterales
durante la recolección de tests.
"""
