"""
===============================================================================
CHECKPOINT USE CASE RESULTS
===============================================================================

Resultados tipados del checkpoint. Reutiliza OutpassError/OutpassErrorCode del
ciclo de vida para que la API tenga un único mapeo código -> HTTP.

- CheckpointLogResult: una entrada recién registrada (scan exitoso).
- CheckpointLogListResult: consulta del ledger.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from ....domain.entities import OutpassLogEntry
from ..outpass.outpass_results import OutpassError


@dataclass
class CheckpointLogResult:
    entry: OutpassLogEntry | None = None
    error: OutpassError | None = None
    # Pase al que apunta el token, si se pudo decodificar.
    request_id: UUID | None = None


@dataclass
class CheckpointLogListResult:
    entries: List[OutpassLogEntry] = field(default_factory=list)
    error: OutpassError | None = None
    # Página llena => offset de la siguiente; None si no hay más.
    next_offset: int | None = None
