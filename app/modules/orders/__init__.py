# -*- coding: utf-8 -*-
"""
app/modules/orders/__init__.py

Autor: Yava
Fecha: 2026-09-04
"""
