"""
===============================================================================
TARJETA CRC — outpass/audit.py
===============================================================================

Responsabilidades:
  - Dejar rastro de quién creó, decidió o escaneó cada pase.
  - Armar AuditEvent a partir de la Identity del llamador (actor + rol).
  - Nunca romper la operación de negocio: si la escritura falla, se loguea.

Acciones:
  - outpass.create   residente solicita un pase
  - outpass.decide   supervisor aprueba o rechaza
  - checkpoint.scan  operador registra salida o regreso

Colaboradores:
  - domain.repositories.AuditEventRepository
  - routers de outpasses y checkpoint (llaman después del caso de uso)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID, uuid4

from .crosscutting.logger import logger
from .domain.entities import AuditEvent
from .domain.repositories import AuditEventRepository
from .identity.users import Identity

ANONYMOUS_ACTOR = "anonymous"


def actor_from_identity(identity: Identity | None) -> str:
    return f"user:{identity.id}" if identity is not None else ANONYMOUS_ACTOR


def _jsonable(value: Any) -> Any:
    # metadata termina en una columna JSONB: UUID, datetime y enums como texto.
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def emit_audit_event(
    repository: AuditEventRepository | None,
    *,
    action: str,
    identity: Identity | None = None,
    target_id: UUID | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> None:
    """Registra `action` sobre `target_id`. Sin repositorio no hace nada."""
    if repository is None:
        return

    details = {"role": identity.role.value} if identity is not None else {}
    details.update(metadata or {})

    event = AuditEvent(
        id=uuid4(),
        actor=actor_from_identity(identity),
        action=action,
        target_id=target_id,
        metadata=_jsonable(details),
    )
    try:
        repository.record_event(event)
    except Exception as exc:
        logger.warning(
            "Falló la escritura del evento de auditoría",
            extra={"action": action, "target_id": target_id, "error": str(exc)},
        )
