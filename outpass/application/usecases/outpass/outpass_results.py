"""
===============================================================================
OUTPASS USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Outpass Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para el ciclo de vida
    del pase y el checkpoint, con un contrato estable para:
      - validaciones
      - autorización por rol
      - pases inexistentes
      - transiciones inválidas (decisión repetida / carrera perdida)
      - pases no aprobados en el checkpoint
      - tokens mal formados

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones
      hacia afuera: la API mapea cada código a un status HTTP distinto y los
      tests verifican el código exacto.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    outpass_results models (module)

Responsibilities:
    - OutpassErrorCode: set acotado de categorías de error.
    - OutpassError (code + message).
    - Resultados: OutpassResult, OutpassListResult, OutpassStatsResult,
      CheckpointTokenResult.

Collaborators:
    - domain.entities.OutpassRequest / OutpassStats
    - interfaces/api/http/error_mapping.py (code -> HTTP)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import OutpassRequest, OutpassStats


class OutpassErrorCode(str, Enum):
    """
    Códigos de error del ciclo de vida y del checkpoint.

    Códigos:
      - VALIDATION_ERROR: inputs inválidos (texto vacío, ventana invertida,
        outcome = pending, límites excedidos).
      - FORBIDDEN: el rol del actor no habilita la operación.
      - NOT_FOUND: no existe un pase con ese id.
      - INVALID_STATE: el pase ya no está pendiente (decisión repetida o
        decisión concurrente perdida).
      - NOT_APPROVED: el pase escaneado no está aprobado.
      - MALFORMED_TOKEN: payload del checkpoint ilegible o inconsistente.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    NOT_APPROVED = "NOT_APPROVED"
    MALFORMED_TOKEN = "MALFORMED_TOKEN"


@dataclass(frozen=True)
class OutpassError:
    """Error de caso de uso (categoría estable + mensaje humano)."""

    code: OutpassErrorCode
    message: str


@dataclass
class OutpassResult:
    """
    Resultado para casos de uso que retornan un único pase.

    Contrato:
      - error is None => request presente
      - error != None => request None
    """

    request: OutpassRequest | None = None
    error: OutpassError | None = None


@dataclass
class OutpassListResult:
    """Listado de pases (lista posiblemente vacía en éxito)."""

    requests: List[OutpassRequest] = field(default_factory=list)
    error: OutpassError | None = None


@dataclass
class OutpassStatsResult:
    stats: OutpassStats | None = None
    error: OutpassError | None = None


@dataclass
class CheckpointTokenResult:
    """
    Token codificado de un pase aprobado.

    token: string listo para QR / copia manual.
    request: el pase del que se proyectó (útil para la UI).
    """

    token: str | None = None
    request: OutpassRequest | None = None
    error: OutpassError | None = None


def error_result(result_cls, code: OutpassErrorCode, message: str):
    """Construye `result_cls(error=...)` de forma consistente."""
    return result_cls(error=OutpassError(code=code, message=message))
