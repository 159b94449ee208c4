"""
===============================================================================
USE CASE: Decide Outpass Request (approve / reject)
===============================================================================

Name:
    Decide Outpass Request Use Case

Business Goal:
    Aplicar la decisión de un supervisor sobre un pase pendiente:
      - pending -> approved
      - pending -> rejected
    Ninguna otra transición existe; una decisión repetida se rechaza.

Concurrencia:
    Dos supervisores pueden decidir el mismo pase a la vez. La escritura es un
    compare-and-swap sobre el estado (update_request_if_status con
    expected_status=PENDING): exactamente uno gana y el otro observa
    INVALID_STATE. Nunca se sobrescribe una decisión previa.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    DecideOutpassRequestUseCase

Responsibilities:
    - Validar actor y rol (SUPERVISOR).
    - Validar outcome (approved | rejected).
    - Verificar existencia y estado actual del pase.
    - Persistir la decisión de forma atómica (CAS) con decided_by/decided_at.

Collaborators:
    - OutpassRequestRepository.get_request / update_request_if_status
    - domain.outpass_policy.can_decide_outpass
    - outpass_results

Error Mapping:
    - FORBIDDEN: actor ausente o no supervisor
    - VALIDATION_ERROR: outcome inválido (incluye "pending")
    - NOT_FOUND: id desconocido
    - INVALID_STATE: el pase ya no está pendiente (antes o durante el CAS)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import OutpassStatus, utcnow
from ....domain.outpass_policy import can_decide_outpass
from ....domain.repositories import OutpassRequestRepository
from ....identity.users import Identity
from .outpass_results import OutpassErrorCode, OutpassResult, error_result

_DECISIONS = frozenset({OutpassStatus.APPROVED, OutpassStatus.REJECTED})


@dataclass(frozen=True)
class DecideOutpassRequestInput:
    actor: Identity | None
    request_id: UUID
    outcome: OutpassStatus | str


class DecideOutpassRequestUseCase:
    """Command: aprueba o rechaza un pase pendiente."""

    def __init__(
        self,
        repository: OutpassRequestRepository,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._requests = repository
        self._clock = clock

    def execute(self, input_data: DecideOutpassRequestInput) -> OutpassResult:
        # ---------------------------------------------------------------------
        # 1) Autorización.
        # ---------------------------------------------------------------------
        actor = input_data.actor
        if not can_decide_outpass(actor):
            return self._error(
                OutpassErrorCode.FORBIDDEN, "Only supervisors can decide outpasses."
            )

        # ---------------------------------------------------------------------
        # 2) Outcome válido (pending no es una decisión).
        # ---------------------------------------------------------------------
        outcome = self._parse_outcome(input_data.outcome)
        if outcome is None:
            return self._error(
                OutpassErrorCode.VALIDATION_ERROR,
                "Outcome must be 'approved' or 'rejected'.",
            )

        # ---------------------------------------------------------------------
        # 3) Existencia + estado actual (fast-path, sin escribir).
        # ---------------------------------------------------------------------
        current = self._requests.get_request(input_data.request_id)
        if current is None:
            return self._error(OutpassErrorCode.NOT_FOUND, "Outpass request not found.")

        if not current.can_transition_to(outcome):
            return self._invalid_state(current.status)

        # ---------------------------------------------------------------------
        # 4) CAS: solo aplica si sigue PENDING.
        # ---------------------------------------------------------------------
        updated = self._requests.update_request_if_status(
            input_data.request_id,
            expected_status=OutpassStatus.PENDING,
            status=outcome,
            decided_by=actor.id,
            decided_at=self._clock(),
        )
        if updated is None:
            # Otro supervisor decidió entre la lectura y la escritura.
            latest = self._requests.get_request(input_data.request_id)
            logger.info(
                "Decisión concurrente perdida",
                extra={"outpass_id": str(input_data.request_id)},
            )
            return self._invalid_state(latest.status if latest else None)

        logger.info(
            "Pase decidido",
            extra={"outpass_id": str(updated.id), "status": updated.status.value},
        )
        return OutpassResult(request=updated)

    @staticmethod
    def _parse_outcome(raw: OutpassStatus | str) -> OutpassStatus | None:
        try:
            outcome = OutpassStatus(raw)
        except ValueError:
            return None
        return outcome if outcome in _DECISIONS else None

    @staticmethod
    def _invalid_state(status: OutpassStatus | None) -> OutpassResult:
        current = status.value if status is not None else "unknown"
        return error_result(
            OutpassResult,
            OutpassErrorCode.INVALID_STATE,
            f"Outpass request is no longer pending (status: {current}).",
        )

    @staticmethod
    def _error(code: OutpassErrorCode, message: str) -> OutpassResult:
        return error_result(OutpassResult, code, message)
