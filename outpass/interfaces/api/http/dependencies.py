"""
===============================================================================
TARJETA CRC — dependencies.py (Dependencias y helpers comunes)
===============================================================================

Responsabilidades:
  - require_capabilities(*roles): identidad autenticada -> objeto de
    capacidades del rol (ResidentCapabilities, SupervisorCapabilities, ...).
  - next_offset(): cálculo uniforme de paginación.

Colaboradores:
  - identity.identity_context.require_identity (401/403 en el borde)
  - application.capabilities.capabilities_for
  - container.get_outpass_services
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends

from outpass.application.capabilities import (
    OutpassServices,
    RoleCapabilities,
    capabilities_for,
)
from outpass.container import get_outpass_services
from outpass.identity.identity_context import require_identity
from outpass.identity.users import Identity, UserRole


def require_capabilities(*roles: UserRole | str) -> Callable:
    """Dependency FastAPI: capacidades del rol autenticado (limitado a `roles`)."""

    def dependency(
        identity: Identity = Depends(require_identity(*roles)),
        services: OutpassServices = Depends(get_outpass_services),
    ) -> RoleCapabilities:
        return capabilities_for(identity, services)

    return dependency


def next_offset(items: list, *, limit: int, offset: int) -> int | None:
    """Página llena => puede haber más."""
    return offset + limit if len(items) == limit else None
