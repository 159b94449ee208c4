"""
===============================================================================
USE CASE: Create Outpass Request
===============================================================================

Name:
    Create Outpass Request Use Case

Business Goal:
    Registrar la solicitud de salida temporal de un residente, garantizando:
      - que solo un residente la crea (para sí mismo)
      - motivo y destino no vacíos (y dentro de límites)
      - ventana de validez no vacía (window_start < window_end)
      - estado inicial PENDING

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateOutpassRequestUseCase

Responsibilities:
    - Validar actor y rol (RESIDENT).
    - Normalizar texto (strip) y validar límites.
    - Normalizar la ventana a UTC (naive => UTC) y validar su orden.
    - Construir OutpassRequest (id nuevo, requester = actor) y persistirlo.

Collaborators:
    - OutpassRequestRepository.insert_request
    - domain.outpass_policy.can_request_outpass
    - outpass_results

-------------------------------------------------------------------------------
INPUTS / OUTPUTS
-------------------------------------------------------------------------------
Inputs:
    - CreateOutpassRequestInput(actor, reason, destination, window_start, window_end)

Outputs:
    - OutpassResult(request | error)

Error Mapping:
    - FORBIDDEN: actor ausente o rol distinto de RESIDENT
    - VALIDATION_ERROR: texto vacío/excedido, ventana vacía o invertida
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from ....crosscutting.logger import logger
from ....domain.entities import OutpassRequest, OutpassStatus, ensure_utc
from ....domain.outpass_policy import can_request_outpass
from ....domain.repositories import OutpassRequestRepository
from ....identity.users import Identity
from .outpass_results import OutpassErrorCode, OutpassResult, error_result

DEFAULT_MAX_REASON_CHARS = 500
DEFAULT_MAX_DESTINATION_CHARS = 200


@dataclass(frozen=True)
class CreateOutpassRequestInput:
    """DTO de entrada (la API ya parseó las fechas)."""

    actor: Identity | None
    reason: str
    destination: str
    window_start: datetime
    window_end: datetime


class CreateOutpassRequestUseCase:
    """Command: crea un pase en estado PENDING."""

    def __init__(
        self,
        repository: OutpassRequestRepository,
        *,
        max_reason_chars: int = DEFAULT_MAX_REASON_CHARS,
        max_destination_chars: int = DEFAULT_MAX_DESTINATION_CHARS,
    ) -> None:
        self._requests = repository
        self._max_reason_chars = max_reason_chars
        self._max_destination_chars = max_destination_chars

    def execute(self, input_data: CreateOutpassRequestInput) -> OutpassResult:
        # ---------------------------------------------------------------------
        # 1) Autorización (solo residentes).
        # ---------------------------------------------------------------------
        actor = input_data.actor
        if not can_request_outpass(actor):
            return self._error(
                OutpassErrorCode.FORBIDDEN, "Only residents can request an outpass."
            )

        # ---------------------------------------------------------------------
        # 2) Texto: no vacío y dentro de límites.
        # ---------------------------------------------------------------------
        reason = (input_data.reason or "").strip()
        destination = (input_data.destination or "").strip()

        if not reason:
            return self._validation_error("Reason is required.")
        if not destination:
            return self._validation_error("Destination is required.")
        if len(reason) > self._max_reason_chars:
            return self._validation_error(
                f"Reason exceeds {self._max_reason_chars} characters."
            )
        if len(destination) > self._max_destination_chars:
            return self._validation_error(
                f"Destination exceeds {self._max_destination_chars} characters."
            )

        # ---------------------------------------------------------------------
        # 3) Ventana de validez.
        # ---------------------------------------------------------------------
        if input_data.window_start is None or input_data.window_end is None:
            return self._validation_error("Both window bounds are required.")

        window_start = ensure_utc(input_data.window_start)
        window_end = ensure_utc(input_data.window_end)
        if window_start >= window_end:
            return self._validation_error("window_start must be before window_end.")

        # ---------------------------------------------------------------------
        # 4) Persistir (estado inicial PENDING, requester = actor).
        # ---------------------------------------------------------------------
        created = self._requests.insert_request(
            OutpassRequest(
                id=uuid4(),
                requester_id=actor.id,
                reason=reason,
                destination=destination,
                window_start=window_start,
                window_end=window_end,
                status=OutpassStatus.PENDING,
            )
        )

        logger.info(
            "Pase creado",
            extra={"outpass_id": str(created.id)},
        )
        return OutpassResult(request=created)

    @staticmethod
    def _validation_error(message: str) -> OutpassResult:
        return error_result(OutpassResult, OutpassErrorCode.VALIDATION_ERROR, message)

    @staticmethod
    def _error(code: OutpassErrorCode, message: str) -> OutpassResult:
        return error_result(OutpassResult, code, message)
