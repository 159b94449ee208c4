"""
===============================================================================
TARJETA CRC — schemas/outpasses.py
===============================================================================

Módulo:
    Schemas HTTP para pases de salida (outpasses)

Responsabilidades:
    - DTOs de request (crear, decidir) con límites desde settings.
    - DTOs de response (pase, listado paginado, stats, token).
    - Mapear entidades de dominio -> DTO (from_entity).

Colaboradores:
    - domain.entities (OutpassRequest, OutpassStats, OutpassStatus)
    - crosscutting.config.get_settings (límites)

Notas:
    - La ventana (window_start < window_end) la valida el caso de uso, así
      el error es el mismo VALIDATION_ERROR venga de HTTP o de otro cliente.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from outpass.crosscutting.config import get_settings
from outpass.domain.entities import OutpassRequest, OutpassStats, OutpassStatus

_settings = get_settings()


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateOutpassReq(BaseModel):
    """Solicitud de salida temporal de un residente."""

    reason: Annotated[
        str,
        Field(
            ...,
            min_length=1,
            max_length=_settings.max_reason_chars,
            description="Motivo de la salida",
        ),
    ]
    destination: Annotated[
        str,
        Field(
            ...,
            min_length=1,
            max_length=_settings.max_destination_chars,
            description="Destino declarado",
        ),
    ]
    window_start: datetime = Field(..., description="Inicio de la ventana (ISO-8601)")
    window_end: datetime = Field(..., description="Fin de la ventana (ISO-8601)")

    @field_validator("reason", "destination")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class DecideOutpassReq(BaseModel):
    """Decisión del supervisor: approved | rejected."""

    outcome: Literal["approved", "rejected"]


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class OutpassRes(BaseModel):
    id: UUID
    requester_id: UUID
    reason: str
    destination: str
    window_start: datetime
    window_end: datetime
    status: OutpassStatus
    decided_by: UUID | None = None
    decided_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, request: OutpassRequest) -> "OutpassRes":
        return cls(
            id=request.id,
            requester_id=request.requester_id,
            reason=request.reason,
            destination=request.destination,
            window_start=request.window_start,
            window_end=request.window_end,
            status=request.status,
            decided_by=request.decided_by,
            decided_at=request.decided_at,
            created_at=request.created_at,
        )


class OutpassesListRes(BaseModel):
    outpasses: list[OutpassRes]
    next_offset: int | None = None


class OutpassStatsRes(BaseModel):
    total_requests: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    total_residents: int

    @classmethod
    def from_entity(cls, stats: OutpassStats) -> "OutpassStatsRes":
        return cls(
            total_requests=stats.total_requests,
            pending_requests=stats.pending_requests,
            approved_requests=stats.approved_requests,
            rejected_requests=stats.rejected_requests,
            total_residents=stats.total_residents,
        )


class CheckpointTokenRes(BaseModel):
    """Token textual (mismo contenido que codifica el QR)."""

    outpass_id: UUID
    token: str
