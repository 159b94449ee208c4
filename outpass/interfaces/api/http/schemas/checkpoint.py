"""
===============================================================================
TARJETA CRC — schemas/checkpoint.py
===============================================================================

Módulo:
    Schemas HTTP del checkpoint (escaneo + ledger)

Responsabilidades:
    - Request de escaneo: payload crudo (texto del QR o JSON ya parseado),
      dirección y notas opcionales.
    - Responses del ledger de movimientos.

Colaboradores:
    - domain.entities (CheckpointDirection, OutpassLogEntry)
    - crosscutting.config.get_settings (límites)
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from outpass.crosscutting.config import get_settings
from outpass.domain.entities import CheckpointDirection, OutpassLogEntry

_settings = get_settings()


class CheckpointScanReq(BaseModel):
    """
    payload:
      - str: contenido leído del QR o tipeado por el operador
      - dict: token ya parseado por el cliente
    La validación fina del token la hace el codec (MALFORMED_TOKEN).
    """

    payload: str | dict[str, Any] = Field(..., description="Token del pase")
    direction: CheckpointDirection
    notes: str | None = Field(default=None, max_length=_settings.max_notes_chars)


class CheckpointLogRes(BaseModel):
    id: UUID
    outpass_id: UUID
    resident_id: UUID
    direction: CheckpointDirection
    recorded_by: UUID
    recorded_at: datetime
    is_late: bool
    notes: str | None = None

    @classmethod
    def from_entity(cls, entry: OutpassLogEntry) -> "CheckpointLogRes":
        return cls(
            id=entry.id,
            outpass_id=entry.request_id,
            resident_id=entry.resident_id,
            direction=entry.direction,
            recorded_by=entry.recorded_by,
            recorded_at=entry.recorded_at,
            is_late=entry.is_late,
            notes=entry.notes,
        )


class CheckpointLogsRes(BaseModel):
    entries: list[CheckpointLogRes]
    next_offset: int | None = None
