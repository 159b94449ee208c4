"""
===============================================================================
USE CASE: Get Outpass Stats (dashboard del supervisor)
===============================================================================

Responsibilities:
    - Agregar conteos: total, pendientes, aprobados, rechazados y residentes
      distintos que alguna vez solicitaron un pase.
    - Restringido a SUPERVISOR.

Collaborators:
    - OutpassRequestRepository.count_requests / count_requesters
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import OutpassStats, OutpassStatus
from ....domain.outpass_policy import can_view_stats
from ....domain.repositories import OutpassRequestRepository
from ....identity.users import Identity
from .outpass_results import OutpassErrorCode, OutpassStatsResult, error_result


class GetOutpassStatsUseCase:
    def __init__(self, repository: OutpassRequestRepository) -> None:
        self._requests = repository

    def execute(self, actor: Identity | None) -> OutpassStatsResult:
        if not can_view_stats(actor):
            return error_result(
                OutpassStatsResult,
                OutpassErrorCode.FORBIDDEN,
                "Only supervisors can view outpass stats.",
            )

        stats = OutpassStats(
            total_requests=self._requests.count_requests(),
            pending_requests=self._requests.count_requests(
                status=OutpassStatus.PENDING
            ),
            approved_requests=self._requests.count_requests(
                status=OutpassStatus.APPROVED
            ),
            rejected_requests=self._requests.count_requests(
                status=OutpassStatus.REJECTED
            ),
            total_residents=self._requests.count_requesters(),
        )
        return OutpassStatsResult(stats=stats)
