"""
===============================================================================
TARJETA CRC — outpass/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, renderer, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons de repositorios con lru_cache.
  - Elegir in-memory vs Postgres según Settings (APP_ENV=test => in-memory).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* (puertos)
  - infrastructure.* (implementaciones)
  - application.usecases.* (casos de uso)

Notas:
  - Sin lógica de negocio.
  - Sin dependencia a FastAPI (solo factories).
  - Los casos de uso se construyen por request (son livianos); los
    repositorios son singletons (el in-memory necesita estado compartido).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.capabilities import OutpassServices
from .application.usecases.checkpoint import (
    ListCheckpointLogsUseCase,
    VerifyCheckpointScanUseCase,
)
from .application.usecases.outpass import (
    CreateOutpassRequestUseCase,
    DecideOutpassRequestUseCase,
    GetOutpassRequestUseCase,
    GetOutpassStatsUseCase,
    IssueCheckpointTokenUseCase,
    ListOutpassesByStatusUseCase,
    ListRequesterOutpassesUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    AuditEventRepository,
    OutpassLogRepository,
    OutpassRequestRepository,
)
from .infrastructure.rendering import QrCodeRenderer
from .infrastructure.repositories import (
    InMemoryAuditEventRepository,
    InMemoryOutpassLogRepository,
    InMemoryOutpassRequestRepository,
    PostgresAuditEventRepository,
    PostgresOutpassLogRepository,
    PostgresOutpassRequestRepository,
)


def _is_test_env() -> bool:
    """app_env ∈ {"test", "testing", "ci"} => in-memory adapters."""
    return get_settings().is_test()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_outpass_request_repository() -> OutpassRequestRepository:
    """RequestStore (in-memory en test; Postgres en runtime)."""
    if _is_test_env():
        return InMemoryOutpassRequestRepository()
    return PostgresOutpassRequestRepository()


@lru_cache(maxsize=1)
def get_outpass_log_repository() -> OutpassLogRepository:
    """LogLedger (in-memory en test; Postgres en runtime)."""
    if _is_test_env():
        return InMemoryOutpassLogRepository()
    return PostgresOutpassLogRepository()


@lru_cache(maxsize=1)
def get_audit_repository() -> AuditEventRepository:
    if _is_test_env():
        return InMemoryAuditEventRepository()
    return PostgresAuditEventRepository()


@lru_cache(maxsize=1)
def get_qr_code_renderer() -> QrCodeRenderer:
    return QrCodeRenderer(box_size=get_settings().qr_box_size)


# =============================================================================
# Casos de uso: ciclo de vida del pase
# =============================================================================


def get_create_outpass_request_use_case() -> CreateOutpassRequestUseCase:
    settings = get_settings()
    return CreateOutpassRequestUseCase(
        repository=get_outpass_request_repository(),
        max_reason_chars=settings.max_reason_chars,
        max_destination_chars=settings.max_destination_chars,
    )


def get_decide_outpass_request_use_case() -> DecideOutpassRequestUseCase:
    return DecideOutpassRequestUseCase(repository=get_outpass_request_repository())


def get_list_requester_outpasses_use_case() -> ListRequesterOutpassesUseCase:
    return ListRequesterOutpassesUseCase(
        repository=get_outpass_request_repository(),
        max_limit=get_settings().max_list_limit,
    )


def get_list_outpasses_by_status_use_case() -> ListOutpassesByStatusUseCase:
    return ListOutpassesByStatusUseCase(
        repository=get_outpass_request_repository(),
        max_limit=get_settings().max_list_limit,
    )


def get_get_outpass_request_use_case() -> GetOutpassRequestUseCase:
    return GetOutpassRequestUseCase(repository=get_outpass_request_repository())


def get_outpass_stats_use_case() -> GetOutpassStatsUseCase:
    return GetOutpassStatsUseCase(repository=get_outpass_request_repository())


def get_issue_checkpoint_token_use_case() -> IssueCheckpointTokenUseCase:
    return IssueCheckpointTokenUseCase(repository=get_outpass_request_repository())


# =============================================================================
# Casos de uso: checkpoint
# =============================================================================


def get_verify_checkpoint_scan_use_case() -> VerifyCheckpointScanUseCase:
    settings = get_settings()
    return VerifyCheckpointScanUseCase(
        request_repository=get_outpass_request_repository(),
        log_repository=get_outpass_log_repository(),
        max_notes_chars=settings.max_notes_chars,
        max_token_chars=settings.max_token_chars,
    )


def get_list_checkpoint_logs_use_case() -> ListCheckpointLogsUseCase:
    settings = get_settings()
    return ListCheckpointLogsUseCase(
        log_repository=get_outpass_log_repository(),
        request_repository=get_outpass_request_repository(),
        recent_limit=settings.recent_logs_limit,
        max_limit=settings.max_list_limit,
    )


def get_outpass_services() -> OutpassServices:
    """Bundle de casos de uso para capabilities_for()."""
    return OutpassServices(
        create=get_create_outpass_request_use_case(),
        decide=get_decide_outpass_request_use_case(),
        list_for_requester=get_list_requester_outpasses_use_case(),
        list_by_status=get_list_outpasses_by_status_use_case(),
        get=get_get_outpass_request_use_case(),
        stats=get_outpass_stats_use_case(),
        issue_token=get_issue_checkpoint_token_use_case(),
        verify_scan=get_verify_checkpoint_scan_use_case(),
        list_logs=get_list_checkpoint_logs_use_case(),
    )
