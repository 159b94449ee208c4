"""
===============================================================================
USE CASE: Get Outpass Request
===============================================================================

Business Goal:
    Obtener un pase por id (detalle del pase / vista del QR).

Reglas:
    - Residente: solo sus propios pases.
    - Supervisor / operador: cualquiera.
    - Un residente que consulta un pase ajeno recibe NOT_FOUND (no se filtra
      la existencia de pases de otros residentes).
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.outpass_policy import can_read_request
from ....domain.repositories import OutpassRequestRepository
from ....identity.users import Identity
from .outpass_results import OutpassErrorCode, OutpassResult, error_result


class GetOutpassRequestUseCase:
    """Query: un pase por id."""

    def __init__(self, repository: OutpassRequestRepository) -> None:
        self._requests = repository

    def execute(self, request_id: UUID, actor: Identity | None) -> OutpassResult:
        if actor is None:
            return error_result(
                OutpassResult, OutpassErrorCode.FORBIDDEN, "Access denied."
            )

        request = self._requests.get_request(request_id)
        if request is None or not can_read_request(actor, request):
            return error_result(
                OutpassResult,
                OutpassErrorCode.NOT_FOUND,
                "Outpass request not found.",
            )

        return OutpassResult(request=request)
