"""
===============================================================================
USE CASES: List Outpass Requests
===============================================================================

Name:
    List Outpass Requests (por residente / por estado)

Business Goal:
    - Residente: ver su historial de pases (más reciente primero).
    - Supervisor: ver la cola de pendientes para decidir.
    - Supervisor / operador de checkpoint: ver los aprobados vigentes.
    - Supervisor: revisar el historial completo (cualquier estado o todos).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    ListRequesterOutpassesUseCase
    ListOutpassesByStatusUseCase

Responsibilities:
    - Validar actor y alcance de lectura (policy).
    - Acotar paginado (limit/offset) a valores sanos.
    - Delegar el filtrado/orden (created_at DESC) al repositorio.

Collaborators:
    - OutpassRequestRepository.list_requests
    - domain.outpass_policy: can_read_resident_data / can_list_by_status /
      can_review_outpass_history

Error Mapping:
    - FORBIDDEN: actor ausente, residente consultando a otro residente,
      residente listando la cola global, operador pidiendo rechazados o
      el historial sin filtro.
    - VALIDATION_ERROR: estado desconocido.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.entities import OutpassStatus
from ....domain.outpass_policy import (
    can_list_by_status,
    can_read_resident_data,
    can_review_outpass_history,
)
from ....domain.repositories import OutpassRequestRepository
from ....identity.users import Identity
from .outpass_results import OutpassErrorCode, OutpassListResult, error_result

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

# Lo que ve cualquier staff; el resto (rechazados, sin filtro) es del supervisor.
_STAFF_QUEUES = frozenset({OutpassStatus.PENDING, OutpassStatus.APPROVED})


def _clamp_page(limit: int, offset: int, max_limit: int) -> tuple[int, int]:
    return max(1, min(limit, max_limit)), max(0, offset)


class ListRequesterOutpassesUseCase:
    """Query: pases de un residente, más reciente primero."""

    def __init__(
        self,
        repository: OutpassRequestRepository,
        *,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> None:
        self._requests = repository
        self._max_limit = max_limit

    def execute(
        self,
        *,
        actor: Identity | None,
        requester_id: UUID | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> OutpassListResult:
        """
        requester_id None => el propio actor (caso "mis pases").
        """
        if actor is None:
            return self._forbidden("Actor is required to list outpasses.")

        target = requester_id or actor.id
        if not can_read_resident_data(actor, target):
            return self._forbidden("Cannot list outpasses of another resident.")

        limit, offset = _clamp_page(limit, offset, self._max_limit)
        requests = self._requests.list_requests(
            requester_id=target, limit=limit, offset=offset
        )
        return OutpassListResult(requests=requests)

    @staticmethod
    def _forbidden(message: str) -> OutpassListResult:
        return error_result(OutpassListResult, OutpassErrorCode.FORBIDDEN, message)


class ListOutpassesByStatusUseCase:
    """
    Query: listado global por estado, más reciente primero.

    status None => todos los estados (historial del supervisor).
    pending()/approved()/history() son atajos para los listados de la UI.
    """

    def __init__(
        self,
        repository: OutpassRequestRepository,
        *,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> None:
        self._requests = repository
        self._max_limit = max_limit

    def execute(
        self,
        *,
        actor: Identity | None,
        status: OutpassStatus | str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> OutpassListResult:
        if not can_list_by_status(actor):
            return error_result(
                OutpassListResult,
                OutpassErrorCode.FORBIDDEN,
                "Only staff can list outpasses by status.",
            )

        if status is not None:
            try:
                status = OutpassStatus(status)
            except ValueError:
                return error_result(
                    OutpassListResult,
                    OutpassErrorCode.VALIDATION_ERROR,
                    f"Unknown outpass status: {status}.",
                )

        if status not in _STAFF_QUEUES and not can_review_outpass_history(actor):
            return error_result(
                OutpassListResult,
                OutpassErrorCode.FORBIDDEN,
                "Only supervisors can review rejected or all outpasses.",
            )

        limit, offset = _clamp_page(limit, offset, self._max_limit)
        requests = self._requests.list_requests(
            status=status, limit=limit, offset=offset
        )
        return OutpassListResult(requests=requests)

    def pending(self, actor: Identity | None, **page) -> OutpassListResult:
        return self.execute(actor=actor, status=OutpassStatus.PENDING, **page)

    def approved(self, actor: Identity | None, **page) -> OutpassListResult:
        return self.execute(actor=actor, status=OutpassStatus.APPROVED, **page)

    def history(self, actor: Identity | None, **page) -> OutpassListResult:
        return self.execute(actor=actor, status=None, **page)
