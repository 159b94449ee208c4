"""
===============================================================================
USE CASE: Verify Checkpoint Scan (salida / regreso)
===============================================================================

Name:
    Verify Checkpoint Scan Use Case

Business Goal:
    Validar en la puerta el pase presentado (QR escaneado o texto tipeado por
    el operador) contra el estado ACTUAL del pase y dejar constancia física
    del movimiento en el ledger.

Why (Context / Intención):
    - El token es solo una referencia: la aprobación se consulta siempre en el
      repositorio (un pase rechazado después de emitir el QR no pasa).
    - Escaneo y carga manual comparten el mismo pipeline decode -> verify,
      así hay un único borde de confianza.
    - La dirección la elige el operador y se acepta tal cual: no se exige
      alternancia salida/regreso.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    VerifyCheckpointScanUseCase

Responsibilities:
    - Validar actor (CHECKPOINT_OPERATOR), dirección y notas.
    - Decodificar el payload (execute) o recibir un token ya decodificado (verify).
    - Buscar el pase; exigir estado APPROVED.
    - Rechazar tokens cuyo requester no coincide con el pase almacenado.
    - Calcular is_late (solo RETURN después de window_end).
    - Registrar exactamente una entrada en el ledger; nunca muta el pase.

Collaborators:
    - application.checkpoint_codec.decode_token / MalformedTokenError
    - OutpassRequestRepository.get_request
    - OutpassLogRepository.append_entry
    - domain.entities.is_late_return

Error Mapping:
    - FORBIDDEN: actor ausente o rol distinto de CHECKPOINT_OPERATOR
    - VALIDATION_ERROR: dirección inválida o notas demasiado largas
    - MALFORMED_TOKEN: payload ilegible / excedido / requester inconsistente
    - NOT_FOUND: el pase referenciado no existe
    - NOT_APPROVED: el pase existe pero no está aprobado
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import uuid4

from ....crosscutting.logger import logger
from ....domain.entities import (
    CheckpointDirection,
    CheckpointToken,
    OutpassLogEntry,
    is_late_return,
    utcnow,
)
from ....domain.outpass_policy import can_record_checkpoint
from ....domain.repositories import OutpassLogRepository, OutpassRequestRepository
from ....identity.users import Identity
from ...checkpoint_codec import MalformedTokenError, TokenPayload, decode_token
from ..outpass.outpass_results import OutpassErrorCode, error_result
from .checkpoint_results import CheckpointLogResult

DEFAULT_MAX_NOTES_CHARS = 500
DEFAULT_MAX_TOKEN_CHARS = 2_000


@dataclass(frozen=True)
class VerifyCheckpointScanInput:
    """
    payload: contenido crudo del QR o texto tipeado (str/bytes/dict).
    direction: exit | return (elegido por el operador).
    """

    actor: Identity | None
    payload: TokenPayload
    direction: CheckpointDirection | str
    notes: str | None = None


class VerifyCheckpointScanUseCase:
    def __init__(
        self,
        request_repository: OutpassRequestRepository,
        log_repository: OutpassLogRepository,
        *,
        clock: Callable[[], datetime] = utcnow,
        max_notes_chars: int = DEFAULT_MAX_NOTES_CHARS,
        max_token_chars: int = DEFAULT_MAX_TOKEN_CHARS,
    ) -> None:
        self._requests = request_repository
        self._logs = log_repository
        self._clock = clock
        self._max_notes_chars = max_notes_chars
        self._max_token_chars = max_token_chars

    def execute(self, input_data: VerifyCheckpointScanInput) -> CheckpointLogResult:
        """decode(payload) -> verify(token). Camino único para QR y carga manual."""
        # ---------------------------------------------------------------------
        # 1) Autorización antes de parsear nada.
        # ---------------------------------------------------------------------
        if not can_record_checkpoint(input_data.actor):
            return self._forbidden()

        # ---------------------------------------------------------------------
        # 2) Decode (errores de formato => MALFORMED_TOKEN, sin side effects).
        # ---------------------------------------------------------------------
        payload = input_data.payload
        if (
            isinstance(payload, (str, bytes, bytearray))
            and len(payload) > self._max_token_chars
        ):
            return self._malformed("Token payload is too large.")

        try:
            token = decode_token(payload)
        except MalformedTokenError as exc:
            logger.info("Token de checkpoint rechazado", extra={"reason": exc.message})
            return self._malformed(exc.message)

        # ---------------------------------------------------------------------
        # 3) Verify contra el estado actual.
        # ---------------------------------------------------------------------
        return self.verify(
            input_data.actor,
            token,
            input_data.direction,
            notes=input_data.notes,
        )

    def verify(
        self,
        actor: Identity | None,
        token: CheckpointToken,
        direction: CheckpointDirection | str,
        *,
        notes: str | None = None,
    ) -> CheckpointLogResult:
        """Valida un token ya decodificado y registra el movimiento."""
        if not can_record_checkpoint(actor):
            return self._forbidden()

        # ---------------------------------------------------------------------
        # 1) Inputs del operador.
        # ---------------------------------------------------------------------
        try:
            direction = CheckpointDirection(direction)
        except ValueError:
            return self._error(
                OutpassErrorCode.VALIDATION_ERROR,
                "Direction must be 'exit' or 'return'.",
            )

        notes = (notes or "").strip() or None
        if notes is not None and len(notes) > self._max_notes_chars:
            return self._error(
                OutpassErrorCode.VALIDATION_ERROR,
                f"Notes exceed {self._max_notes_chars} characters.",
            )

        # ---------------------------------------------------------------------
        # 2) Lookup + estado (la aprobación nunca se infiere del token).
        # ---------------------------------------------------------------------
        request = self._requests.get_request(token.request_id)
        if request is None:
            result = self._error(OutpassErrorCode.NOT_FOUND, "Outpass request not found.")
            result.request_id = token.request_id
            return result

        if not request.is_approved:
            return self._error(
                OutpassErrorCode.NOT_APPROVED,
                f"Outpass request is {request.status.value}, not approved.",
            )

        if token.requester_id != request.requester_id:
            logger.warning(
                "Token con requester inconsistente",
                extra={"outpass_id": str(request.id)},
            )
            return self._malformed("Token does not match the outpass request.")

        # ---------------------------------------------------------------------
        # 3) Lateness + append (única escritura).
        # ---------------------------------------------------------------------
        recorded_at = self._clock()
        entry = self._logs.append_entry(
            OutpassLogEntry(
                id=uuid4(),
                request_id=request.id,
                resident_id=request.requester_id,
                direction=direction,
                recorded_by=actor.id,
                recorded_at=recorded_at,
                is_late=is_late_return(direction, recorded_at, request.window_end),
                notes=notes,
            )
        )

        logger.info(
            "Movimiento registrado en checkpoint",
            extra={
                "outpass_id": str(request.id),
                "direction": direction.value,
                "is_late": entry.is_late,
            },
        )
        return CheckpointLogResult(entry=entry)

    @staticmethod
    def _forbidden() -> CheckpointLogResult:
        return error_result(
            CheckpointLogResult,
            OutpassErrorCode.FORBIDDEN,
            "Only checkpoint operators can record movements.",
        )

    @staticmethod
    def _malformed(message: str) -> CheckpointLogResult:
        return error_result(
            CheckpointLogResult, OutpassErrorCode.MALFORMED_TOKEN, message
        )

    @staticmethod
    def _error(code: OutpassErrorCode, message: str) -> CheckpointLogResult:
        return error_result(CheckpointLogResult, code, message)
