"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test => in-memory repositories)
  - Provide identities for the three roles
  - Provide in-memory repositories and use-case bundles
  - Provide a fixed clock for lateness scenarios

Collaborators:
  - pytest: Test framework
  - outpass.infrastructure.repositories.in_memory: fakes for the ports
  - outpass.container: OutpassServices wiring

Notes:
  - Fixtures are function-scoped for per-test isolation
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-with-at-least-32-characters")

from outpass.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from outpass.application.capabilities import OutpassServices  # noqa: E402
from outpass.application.usecases.checkpoint import (  # noqa: E402
    ListCheckpointLogsUseCase,
    VerifyCheckpointScanUseCase,
)
from outpass.application.usecases.outpass import (  # noqa: E402
    CreateOutpassRequestUseCase,
    DecideOutpassRequestUseCase,
    GetOutpassRequestUseCase,
    GetOutpassStatsUseCase,
    IssueCheckpointTokenUseCase,
    ListOutpassesByStatusUseCase,
    ListRequesterOutpassesUseCase,
)
from outpass.domain.entities import OutpassRequest, OutpassStatus  # noqa: E402
from outpass.identity.users import Identity, UserRole  # noqa: E402
from outpass.infrastructure.repositories import (  # noqa: E402
    InMemoryAuditEventRepository,
    InMemoryOutpassLogRepository,
    InMemoryOutpassRequestRepository,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require PostgreSQL)"
    )


def utc(year, month, day, hour=0, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class FixedClock:
    """Reloj manual: tests avanzan el tiempo con set()."""

    def __init__(self, now: datetime):
        self.now = now

    def set(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# ============================================================================
# Identities
# ============================================================================


@pytest.fixture
def resident() -> Identity:
    return Identity(id=uuid4(), role=UserRole.RESIDENT)


@pytest.fixture
def other_resident() -> Identity:
    return Identity(id=uuid4(), role=UserRole.RESIDENT)


@pytest.fixture
def supervisor() -> Identity:
    return Identity(id=uuid4(), role=UserRole.SUPERVISOR)


@pytest.fixture
def operator() -> Identity:
    return Identity(id=uuid4(), role=UserRole.CHECKPOINT_OPERATOR)


# ============================================================================
# Repositories / clock
# ============================================================================


@pytest.fixture
def request_repo() -> InMemoryOutpassRequestRepository:
    return InMemoryOutpassRequestRepository()


@pytest.fixture
def log_repo() -> InMemoryOutpassLogRepository:
    return InMemoryOutpassLogRepository()


@pytest.fixture
def audit_repo() -> InMemoryAuditEventRepository:
    return InMemoryAuditEventRepository()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(utc(2025, 3, 1, 12, 0))


@pytest.fixture
def make_request(request_repo, resident):
    """Factory: inserta un pase con la ventana 14:00-18:00 del 2025-03-01."""

    def _make(
        *,
        requester: Identity | None = None,
        status: OutpassStatus = OutpassStatus.PENDING,
        window_start: datetime | None = None,
        window_end: datetime | None = None,
        destination: str = "Ciudad",
    ) -> OutpassRequest:
        return request_repo.insert_request(
            OutpassRequest(
                id=uuid4(),
                requester_id=(requester or resident).id,
                reason="Visita familiar",
                destination=destination,
                window_start=window_start or utc(2025, 3, 1, 14, 0),
                window_end=window_end or utc(2025, 3, 1, 18, 0),
                status=status,
            )
        )

    return _make


@pytest.fixture
def services(request_repo, log_repo, clock) -> OutpassServices:
    return OutpassServices(
        create=CreateOutpassRequestUseCase(request_repo),
        decide=DecideOutpassRequestUseCase(request_repo, clock=clock),
        list_for_requester=ListRequesterOutpassesUseCase(request_repo),
        list_by_status=ListOutpassesByStatusUseCase(request_repo),
        get=GetOutpassRequestUseCase(request_repo),
        stats=GetOutpassStatsUseCase(request_repo),
        issue_token=IssueCheckpointTokenUseCase(request_repo),
        verify_scan=VerifyCheckpointScanUseCase(request_repo, log_repo, clock=clock),
        list_logs=ListCheckpointLogsUseCase(log_repo, request_repo),
    )
