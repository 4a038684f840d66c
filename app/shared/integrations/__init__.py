# -*- coding: utf-8 -*-
"""
app/shared/integrations/__init__.py

Integraciones con servicios externos (Supabase).

Autor: Yava
Fecha: 2026-09-05
"""
