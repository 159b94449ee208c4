"""
===============================================================================
USE CASE: Issue Checkpoint Token
===============================================================================

Name:
    Issue Checkpoint Token Use Case

Business Goal:
    Entregar al residente (o a un supervisor) el token de un pase APROBADO,
    listo para mostrarse como QR o copiarse a mano en el checkpoint.

Why (Context / Intención):
    - Solo los pases aprobados tienen código: un pase pendiente o rechazado
      no debería poder presentarse en la puerta.
    - El token es una proyección efímera: se recalcula en cada pedido y no se
      persiste. Aun así, el checkpoint vuelve a consultar el estado real.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    IssueCheckpointTokenUseCase

Collaborators:
    - OutpassRequestRepository.get_request
    - application.checkpoint_codec.encode_token
    - domain.outpass_policy.can_issue_token

Error Mapping:
    - FORBIDDEN: actor ausente, rol no habilitado
    - NOT_FOUND: id desconocido o pase ajeno (residente)
    - NOT_APPROVED: el pase no está aprobado
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.outpass_policy import can_issue_token, can_read_request
from ....domain.repositories import OutpassRequestRepository
from ....identity.users import Identity
from ...checkpoint_codec import encode_token
from .outpass_results import CheckpointTokenResult, OutpassErrorCode, error_result


class IssueCheckpointTokenUseCase:
    def __init__(self, repository: OutpassRequestRepository) -> None:
        self._requests = repository

    def execute(self, request_id: UUID, actor: Identity | None) -> CheckpointTokenResult:
        # 1) Actor requerido.
        if actor is None:
            return self._error(OutpassErrorCode.FORBIDDEN, "Access denied.")

        # 2) Existencia (los pases ajenos se reportan como inexistentes).
        request = self._requests.get_request(request_id)
        if request is None or not can_read_request(actor, request):
            return self._error(OutpassErrorCode.NOT_FOUND, "Outpass request not found.")

        # 3) Rol habilitado para obtener el código.
        if not can_issue_token(actor, request):
            return self._error(
                OutpassErrorCode.FORBIDDEN,
                "Only the requester or a supervisor can obtain the token.",
            )

        # 4) Solo pases aprobados tienen código.
        if not request.is_approved:
            return self._error(
                OutpassErrorCode.NOT_APPROVED,
                f"Outpass request is {request.status.value}, not approved.",
            )

        return CheckpointTokenResult(token=encode_token(request), request=request)

    @staticmethod
    def _error(code: OutpassErrorCode, message: str) -> CheckpointTokenResult:
        return error_result(CheckpointTokenResult, code, message)
