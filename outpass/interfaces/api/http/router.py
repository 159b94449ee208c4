"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que api/main.py monta con prefix="/v1".
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por feature (outpasses / checkpoint).

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import checkpoint_router, outpasses_router


def build_router() -> APIRouter:
    """Construye el router raíz v1 (testeable sin montar la app)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    api_router.include_router(outpasses_router)
    api_router.include_router(checkpoint_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
