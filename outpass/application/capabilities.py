"""
===============================================================================
TARJETA CRC — application/capabilities.py
===============================================================================

Módulo:
    Capacidades por rol (resident / supervisor / checkpoint_operator)

Responsabilidades:
    - Exponer, para cada rol, SOLO las operaciones que ese rol puede invocar.
    - Elegir la capacidad por rol en un único punto (capabilities_for).
    - Atar la Identity a cada llamada: el core nunca lee sesión ambiental.

Colaboradores:
    - OutpassServices: agrupa los casos de uso (los arma el container).
    - identity.users.Identity / UserRole

Notas:
    - Los casos de uso siguen validando el rol en su borde (FORBIDDEN); las
      capacidades solo evitan que un cliente llegue a ofrecer operaciones
      ajenas a su rol.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from ..domain.entities import CheckpointDirection, OutpassStatus
from ..identity.users import Identity, UserRole
from .checkpoint_codec import TokenPayload
from .usecases.checkpoint import (
    CheckpointLogListResult,
    CheckpointLogResult,
    ListCheckpointLogsUseCase,
    VerifyCheckpointScanInput,
    VerifyCheckpointScanUseCase,
)
from .usecases.outpass import (
    CheckpointTokenResult,
    CreateOutpassRequestInput,
    CreateOutpassRequestUseCase,
    DecideOutpassRequestInput,
    DecideOutpassRequestUseCase,
    GetOutpassRequestUseCase,
    GetOutpassStatsUseCase,
    IssueCheckpointTokenUseCase,
    ListOutpassesByStatusUseCase,
    ListRequesterOutpassesUseCase,
    OutpassListResult,
    OutpassResult,
    OutpassStatsResult,
)


@dataclass(frozen=True)
class OutpassServices:
    """Casos de uso disponibles (inyectados por el container o por tests)."""

    create: CreateOutpassRequestUseCase
    decide: DecideOutpassRequestUseCase
    list_for_requester: ListRequesterOutpassesUseCase
    list_by_status: ListOutpassesByStatusUseCase
    get: GetOutpassRequestUseCase
    stats: GetOutpassStatsUseCase
    issue_token: IssueCheckpointTokenUseCase
    verify_scan: VerifyCheckpointScanUseCase
    list_logs: ListCheckpointLogsUseCase


class RoleCapabilities:
    """Base: identidad + servicios. Operaciones comunes a todos los roles."""

    role: UserRole

    def __init__(self, identity: Identity, services: OutpassServices) -> None:
        self.identity = identity
        self._services = services

    def get_outpass(self, request_id: UUID) -> OutpassResult:
        return self._services.get.execute(request_id, self.identity)


class ResidentCapabilities(RoleCapabilities):
    role = UserRole.RESIDENT

    def request_outpass(
        self,
        *,
        reason: str,
        destination: str,
        window_start: datetime,
        window_end: datetime,
    ) -> OutpassResult:
        return self._services.create.execute(
            CreateOutpassRequestInput(
                actor=self.identity,
                reason=reason,
                destination=destination,
                window_start=window_start,
                window_end=window_end,
            )
        )

    def my_outpasses(self, *, limit: int = 50, offset: int = 0) -> OutpassListResult:
        return self._services.list_for_requester.execute(
            actor=self.identity, limit=limit, offset=offset
        )

    def checkpoint_token(self, request_id: UUID) -> CheckpointTokenResult:
        return self._services.issue_token.execute(request_id, self.identity)

    def my_logs(self, *, limit: int | None = None) -> CheckpointLogListResult:
        return self._services.list_logs.execute(
            actor=self.identity, resident_id=self.identity.id, limit=limit
        )


class SupervisorCapabilities(RoleCapabilities):
    role = UserRole.SUPERVISOR

    def decide(
        self, request_id: UUID, outcome: OutpassStatus | str
    ) -> OutpassResult:
        return self._services.decide.execute(
            DecideOutpassRequestInput(
                actor=self.identity, request_id=request_id, outcome=outcome
            )
        )

    def approve(self, request_id: UUID) -> OutpassResult:
        return self.decide(request_id, OutpassStatus.APPROVED)

    def reject(self, request_id: UUID) -> OutpassResult:
        return self.decide(request_id, OutpassStatus.REJECTED)

    def pending(self, **page) -> OutpassListResult:
        return self._services.list_by_status.pending(self.identity, **page)

    def approved(self, **page) -> OutpassListResult:
        return self._services.list_by_status.approved(self.identity, **page)

    def history(self, **page) -> OutpassListResult:
        return self._services.list_by_status.history(self.identity, **page)

    def outpasses_of(self, resident_id: UUID, **page) -> OutpassListResult:
        return self._services.list_for_requester.execute(
            actor=self.identity, requester_id=resident_id, **page
        )

    def stats(self) -> OutpassStatsResult:
        return self._services.stats.execute(self.identity)

    def checkpoint_token(self, request_id: UUID) -> CheckpointTokenResult:
        return self._services.issue_token.execute(request_id, self.identity)

    def logs(
        self,
        *,
        request_id: UUID | None = None,
        resident_id: UUID | None = None,
        limit: int | None = None,
    ) -> CheckpointLogListResult:
        return self._services.list_logs.execute(
            actor=self.identity,
            request_id=request_id,
            resident_id=resident_id,
            limit=limit,
        )


class CheckpointOperatorCapabilities(RoleCapabilities):
    role = UserRole.CHECKPOINT_OPERATOR

    def scan(
        self,
        payload: TokenPayload,
        direction: CheckpointDirection | str,
        *,
        notes: str | None = None,
    ) -> CheckpointLogResult:
        """QR escaneado o texto tipeado: mismo pipeline."""
        return self._services.verify_scan.execute(
            VerifyCheckpointScanInput(
                actor=self.identity,
                payload=payload,
                direction=direction,
                notes=notes,
            )
        )

    def approved(self, **page) -> OutpassListResult:
        return self._services.list_by_status.approved(self.identity, **page)

    def logs(
        self,
        *,
        request_id: UUID | None = None,
        resident_id: UUID | None = None,
        limit: int | None = None,
    ) -> CheckpointLogListResult:
        return self._services.list_logs.execute(
            actor=self.identity,
            request_id=request_id,
            resident_id=resident_id,
            limit=limit,
        )


_CAPABILITIES_BY_ROLE: dict[UserRole, type[RoleCapabilities]] = {
    UserRole.RESIDENT: ResidentCapabilities,
    UserRole.SUPERVISOR: SupervisorCapabilities,
    UserRole.CHECKPOINT_OPERATOR: CheckpointOperatorCapabilities,
}


def capabilities_for(
    identity: Identity | None, services: OutpassServices
) -> RoleCapabilities | None:
    """Capacidad del rol de `identity` (None si no hay identidad)."""
    if identity is None:
        return None
    return _CAPABILITIES_BY_ROLE[identity.role](identity, services)
