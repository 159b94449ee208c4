"""
===============================================================================
TARJETA CRC — domain/outpass_policy.py
===============================================================================

Módulo:
    Política de acceso a pases y checkpoint (por rol)

Responsabilidades:
    - Definir reglas puras de autorización (sin DB, sin FastAPI).
    - Separar "policy" de "repos" (repos traen datos, policy decide).
    - Ser 100% testeable: funciones puras, inputs explícitos.

Colaboradores:
    - identity.users.Identity / UserRole
    - domain.entities.OutpassRequest
    - application/usecases: cada caso de uso consulta esta policy en su borde.

Reglas:
    - Solo RESIDENT crea pases (para sí mismo).
    - Solo SUPERVISOR decide pases.
    - Solo CHECKPOINT_OPERATOR registra salidas/regresos.
    - RESIDENT solo lee sus propios pases y logs; SUPERVISOR y
      CHECKPOINT_OPERATOR leen todo.
    - El token del pase lo obtiene su dueño o un supervisor.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ..identity.users import Identity, UserRole
from .entities import OutpassRequest

_STAFF_ROLES = frozenset({UserRole.SUPERVISOR, UserRole.CHECKPOINT_OPERATOR})


def _has_role(actor: Identity | None, *roles: UserRole) -> bool:
    return actor is not None and actor.role in roles


def can_request_outpass(actor: Identity | None) -> bool:
    """Evalúa permiso de creación."""
    return _has_role(actor, UserRole.RESIDENT)


def can_decide_outpass(actor: Identity | None) -> bool:
    """Evalúa permiso de aprobación/rechazo."""
    return _has_role(actor, UserRole.SUPERVISOR)


def can_record_checkpoint(actor: Identity | None) -> bool:
    """Evalúa permiso para registrar movimientos en el checkpoint."""
    return _has_role(actor, UserRole.CHECKPOINT_OPERATOR)


def can_view_stats(actor: Identity | None) -> bool:
    return _has_role(actor, UserRole.SUPERVISOR)


def can_list_by_status(actor: Identity | None) -> bool:
    """Listados globales (pendientes / aprobados) son solo para staff."""
    return actor is not None and actor.role in _STAFF_ROLES


def can_review_outpass_history(actor: Identity | None) -> bool:
    """Historial completo (todos los estados, incluidos rechazados)."""
    return _has_role(actor, UserRole.SUPERVISOR)


def can_read_resident_data(actor: Identity | None, resident_id: UUID) -> bool:
    """Lectura de pases/logs de un residente: el propio residente o staff."""
    if actor is None:
        return False
    if actor.role in _STAFF_ROLES:
        return True
    return actor.role == UserRole.RESIDENT and actor.id == resident_id


def can_read_request(actor: Identity | None, request: OutpassRequest) -> bool:
    """Evalúa permiso de lectura de un pase puntual."""
    return can_read_resident_data(actor, request.requester_id)


def can_issue_token(actor: Identity | None, request: OutpassRequest) -> bool:
    """El QR lo obtiene el dueño del pase o un supervisor."""
    if actor is None:
        return False
    if actor.role == UserRole.SUPERVISOR:
        return True
    return actor.role == UserRole.RESIDENT and actor.id == request.requester_id
