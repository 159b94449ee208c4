"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (OutpassRequest, OutpassLogEntry, CheckpointToken)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Modelar el estado del pase como enum con default explícito (PENDING).
    - Brindar helpers mínimos para mantener invariantes simples
      (ventana de validez, lateness).

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases: construyen/consumen estas entidades.
    - application/checkpoint_codec: serializa CheckpointToken.
    - interfaces/api: serializa DTOs basados en estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
    - Datos + comportamiento mínimo.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID


def utcnow() -> datetime:
    """Fecha/hora UTC (fuente única de tiempo por defecto)."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normaliza un datetime a UTC aware.

    - naive => se interpreta como UTC
    - aware => se convierte a UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# OutpassRequest
# ---------------------------------------------------------------------------


class OutpassStatus(str, Enum):
    """Estado del pase. Default explícito: PENDING."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Transiciones válidas del state machine (decisión única).
ALLOWED_TRANSITIONS: dict[OutpassStatus, frozenset[OutpassStatus]] = {
    OutpassStatus.PENDING: frozenset({OutpassStatus.APPROVED, OutpassStatus.REJECTED}),
    OutpassStatus.APPROVED: frozenset(),
    OutpassStatus.REJECTED: frozenset(),
}


@dataclass
class OutpassRequest:
    """
    Solicitud de salida temporal de un residente.

    Invariantes:
      - window_start < window_end
      - decided_by / decided_at presentes sii status != PENDING
      - nunca se borra (trazabilidad)
    """

    id: UUID
    requester_id: UUID
    reason: str
    destination: str
    window_start: datetime
    window_end: datetime
    status: OutpassStatus = OutpassStatus.PENDING
    decided_by: Optional[UUID] = None
    decided_at: Optional[datetime] = None

    # Auditoría (la setea el repositorio)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == OutpassStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == OutpassStatus.APPROVED

    def can_transition_to(self, target: OutpassStatus) -> bool:
        """True si target es alcanzable desde el estado actual."""
        return target in ALLOWED_TRANSITIONS[self.status]


# ---------------------------------------------------------------------------
# Checkpoint
# ---------------------------------------------------------------------------


class CheckpointDirection(str, Enum):
    """Sentido del movimiento registrado en el checkpoint."""

    EXIT = "exit"
    RETURN = "return"


@dataclass(frozen=True, slots=True)
class CheckpointToken:
    """
    Proyección efímera de un pase, pensada para viajar en un QR.

    Nota:
      - No es entidad de registro: se regenera on-demand y nunca se persiste.
    """

    request_id: UUID
    requester_id: UUID
    destination: str
    window_start: datetime
    window_end: datetime

    @classmethod
    def from_request(cls, request: OutpassRequest) -> "CheckpointToken":
        return cls(
            request_id=request.id,
            requester_id=request.requester_id,
            destination=request.destination,
            window_start=ensure_utc(request.window_start),
            window_end=ensure_utc(request.window_end),
        )


@dataclass(frozen=True, slots=True)
class OutpassLogEntry:
    """
    Evento físico de salida/regreso registrado en el checkpoint.

    Append-only: se crea una vez (recorded_at / is_late fijos) y no se edita.
    """

    id: UUID
    request_id: UUID
    resident_id: UUID
    direction: CheckpointDirection
    recorded_by: UUID
    recorded_at: datetime
    is_late: bool = False
    notes: Optional[str] = None


def is_late_return(
    direction: CheckpointDirection, recorded_at: datetime, window_end: datetime
) -> bool:
    """Regla de tardanza: solo un RETURN posterior a window_end es tarde."""
    return direction == CheckpointDirection.RETURN and ensure_utc(
        recorded_at
    ) > ensure_utc(window_end)


# ---------------------------------------------------------------------------
# Estadísticas (dashboard de supervisión)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OutpassStats:
    """Conteos agregados para el panel del supervisor."""

    total_requests: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    total_residents: int


# ---------------------------------------------------------------------------
# Auditoría
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class AuditEvent:
    """
    Evento de auditoría (append-only).

    actor: "user:{uuid}" o "anonymous"
    action: verbo estable, ej. "outpass.decide"
    """

    id: UUID
    actor: str
    action: str
    target_id: Optional[UUID] = None
    metadata: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None
