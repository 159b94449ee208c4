"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Identidad del llamador (id + rol)

Responsabilidades:
    - Definir el catálogo de roles (resident / supervisor / checkpoint_operator).
    - Definir Identity: el valor que el IdentityContext entrega al core.

Colaboradores:
    - identity/identity_context.py: resuelve Identity desde el JWT.
    - domain/outpass_policy.py: decide permisos por rol.
    - application/capabilities.py: elige capacidades por rol.

Notas:
    - Identity es inmutable: el backend de auth la emite, el core solo la lee.
    - Este módulo NO contiene lógica de negocio: solo "shapes" de datos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados."""

    RESIDENT = "resident"
    SUPERVISOR = "supervisor"
    CHECKPOINT_OPERATOR = "checkpoint_operator"


@dataclass(frozen=True, slots=True)
class Identity:
    """Identidad resuelta del llamador."""

    id: UUID
    role: UserRole
