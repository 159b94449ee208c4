"""
===============================================================================
USE CASE: List Checkpoint Logs
===============================================================================

Business Goal:
    Consultar el ledger de movimientos:
      - por pase (auditoría): orden de registro (más antiguo primero)
      - "actividad reciente" del checkpoint: más reciente primero, acotado

Reglas de acceso:
    - Supervisor / operador: cualquier pase o residente, y el feed global.
    - Residente: solo sus propios movimientos (resident_id = actor); si
      consulta por pase, el pase debe ser suyo (si no, NOT_FOUND).

Collaborators:
    - OutpassLogRepository.list_entries
    - OutpassRequestRepository.get_request (chequeo de pertenencia)
    - domain.outpass_policy
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.outpass_policy import (
    can_list_by_status,
    can_read_request,
    can_read_resident_data,
)
from ....domain.repositories import OutpassLogRepository, OutpassRequestRepository
from ....identity.users import Identity
from ..outpass.outpass_results import OutpassErrorCode, error_result
from .checkpoint_results import CheckpointLogListResult

DEFAULT_RECENT_LIMIT = 10
MAX_LOG_LIMIT = 200


class ListCheckpointLogsUseCase:
    def __init__(
        self,
        log_repository: OutpassLogRepository,
        request_repository: OutpassRequestRepository,
        *,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        max_limit: int = MAX_LOG_LIMIT,
    ) -> None:
        self._logs = log_repository
        self._requests = request_repository
        self._recent_limit = recent_limit
        self._max_limit = max_limit

    def execute(
        self,
        *,
        actor: Identity | None,
        request_id: UUID | None = None,
        resident_id: UUID | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> CheckpointLogListResult:
        """
        Orden:
          - con request_id: recorded_at ASC (historial del pase, de a max_limit)
          - sin request_id: recorded_at DESC (feed), limit por defecto = recent_limit

        next_offset permite seguir paginando cuando la página vino llena.
        """
        if actor is None:
            return self._forbidden("Actor is required to list checkpoint logs.")

        # ---------------------------------------------------------------------
        # 1) Alcance de lectura.
        # ---------------------------------------------------------------------
        if request_id is not None:
            request = self._requests.get_request(request_id)
            if request is None or not can_read_request(actor, request):
                return error_result(
                    CheckpointLogListResult,
                    OutpassErrorCode.NOT_FOUND,
                    "Outpass request not found.",
                )
        elif resident_id is not None:
            if not can_read_resident_data(actor, resident_id):
                return self._forbidden("Cannot read logs of another resident.")
        elif not can_list_by_status(actor):
            # Residente sin filtro => sus propios movimientos.
            resident_id = actor.id

        # ---------------------------------------------------------------------
        # 2) Orden y tamaño.
        # ---------------------------------------------------------------------
        newest_first = request_id is None
        if limit is None:
            limit = self._max_limit if request_id is not None else self._recent_limit
        limit = max(1, min(limit, self._max_limit))
        offset = max(0, offset)

        entries = self._logs.list_entries(
            request_id=request_id,
            resident_id=resident_id,
            newest_first=newest_first,
            limit=limit,
            offset=offset,
        )
        return CheckpointLogListResult(
            entries=entries,
            next_offset=offset + limit if len(entries) == limit else None,
        )

    @staticmethod
    def _forbidden(message: str) -> CheckpointLogListResult:
        return error_result(
            CheckpointLogListResult, OutpassErrorCode.FORBIDDEN, message
        )
