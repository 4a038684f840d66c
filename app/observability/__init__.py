# -*- coding: utf-8 -*-
"""
app/observability/__init__.py

Observabilidad (Prometheus).
"""
