# -*- coding: utf-8 -*-
"""
app/modules/businesses/__init__.py

Autor: Yava
Fecha: 2026-09-04
"""
