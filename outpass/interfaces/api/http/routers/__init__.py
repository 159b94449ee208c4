"""
===============================================================================
TARJETA CRC — outpass/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Re-exportar routers por feature para el router raíz.

Notas:
    - Este archivo NO define endpoints.
===============================================================================
"""

from .checkpoint import router as checkpoint_router
from .outpasses import router as outpasses_router

__all__ = ["checkpoint_router", "outpasses_router"]
