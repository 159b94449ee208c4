"""
Name: Outpass Lifecycle Use Case Tests

Responsibilities:
  - Validate CreateOutpassRequestUseCase (role, text limits, window)
  - Validate DecideOutpassRequestUseCase (single decision, CAS under contention)
"""

import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from outpass.application.usecases.outpass import (
    CreateOutpassRequestInput,
    CreateOutpassRequestUseCase,
    DecideOutpassRequestInput,
    DecideOutpassRequestUseCase,
    OutpassErrorCode,
)
from outpass.domain.entities import OutpassStatus
from outpass.identity.users import Identity, UserRole

pytestmark = pytest.mark.unit

START = datetime(2025, 3, 1, 14, 0, tzinfo=timezone.utc)
END = datetime(2025, 3, 1, 18, 0, tzinfo=timezone.utc)


def _create_input(actor, **overrides) -> CreateOutpassRequestInput:
    data = dict(
        actor=actor,
        reason="Visita familiar",
        destination="Ciudad",
        window_start=START,
        window_end=END,
    )
    data.update(overrides)
    return CreateOutpassRequestInput(**data)


# =============================================================================
# Create
# =============================================================================


def test_create_stores_pending_request_owned_by_actor(request_repo, resident):
    use_case = CreateOutpassRequestUseCase(request_repo)

    result = use_case.execute(_create_input(resident, reason="  Visita familiar  "))

    assert result.error is None
    created = result.request
    assert created.status == OutpassStatus.PENDING
    assert created.requester_id == resident.id
    assert created.reason == "Visita familiar"
    assert created.decided_by is None
    assert request_repo.get_request(created.id) == created


@pytest.mark.parametrize(
    "role", [UserRole.SUPERVISOR, UserRole.CHECKPOINT_OPERATOR]
)
def test_create_forbidden_for_non_residents(request_repo, role):
    use_case = CreateOutpassRequestUseCase(request_repo)
    actor = Identity(id=uuid4(), role=role)

    result = use_case.execute(_create_input(actor))

    assert result.error.code == OutpassErrorCode.FORBIDDEN
    assert request_repo.count_requests() == 0


def test_create_forbidden_without_actor(request_repo):
    result = CreateOutpassRequestUseCase(request_repo).execute(_create_input(None))
    assert result.error.code == OutpassErrorCode.FORBIDDEN


@pytest.mark.parametrize(
    "overrides",
    [
        {"reason": "   "},
        {"destination": ""},
        {"reason": "x" * 11},
        {"destination": "y" * 11},
        {"window_end": START},
        {"window_end": START - timedelta(minutes=1)},
        {"window_start": None},
    ],
)
def test_create_validation_errors(request_repo, resident, overrides):
    use_case = CreateOutpassRequestUseCase(
        request_repo, max_reason_chars=10, max_destination_chars=10
    )

    result = use_case.execute(_create_input(resident, **overrides))

    assert result.error.code == OutpassErrorCode.VALIDATION_ERROR
    assert request_repo.count_requests() == 0


# =============================================================================
# Decide
# =============================================================================


@pytest.mark.parametrize("outcome", ["approved", OutpassStatus.REJECTED])
def test_decide_records_decision(request_repo, make_request, supervisor, clock, outcome):
    pending = make_request()
    use_case = DecideOutpassRequestUseCase(request_repo, clock=clock)

    result = use_case.execute(
        DecideOutpassRequestInput(
            actor=supervisor, request_id=pending.id, outcome=outcome
        )
    )

    assert result.error is None
    assert result.request.status == OutpassStatus(outcome)
    assert result.request.decided_by == supervisor.id
    assert result.request.decided_at == clock.now
    assert request_repo.get_request(pending.id).status == OutpassStatus(outcome)


def test_second_decision_is_invalid_state(request_repo, make_request, supervisor):
    pending = make_request()
    use_case = DecideOutpassRequestUseCase(request_repo)
    use_case.execute(
        DecideOutpassRequestInput(supervisor, pending.id, OutpassStatus.APPROVED)
    )

    result = use_case.execute(
        DecideOutpassRequestInput(supervisor, pending.id, OutpassStatus.REJECTED)
    )

    assert result.error.code == OutpassErrorCode.INVALID_STATE
    assert request_repo.get_request(pending.id).status == OutpassStatus.APPROVED


def test_decide_pending_outcome_is_validation_error(request_repo, make_request, supervisor):
    pending = make_request()
    result = DecideOutpassRequestUseCase(request_repo).execute(
        DecideOutpassRequestInput(supervisor, pending.id, "pending")
    )
    assert result.error.code == OutpassErrorCode.VALIDATION_ERROR


def test_decide_unknown_request_is_not_found(request_repo, supervisor):
    result = DecideOutpassRequestUseCase(request_repo).execute(
        DecideOutpassRequestInput(supervisor, uuid4(), "approved")
    )
    assert result.error.code == OutpassErrorCode.NOT_FOUND


@pytest.mark.parametrize("fixture_name", ["resident", "operator"])
def test_decide_forbidden_for_non_supervisors(
    request, request_repo, make_request, fixture_name
):
    pending = make_request()
    actor = request.getfixturevalue(fixture_name)

    result = DecideOutpassRequestUseCase(request_repo).execute(
        DecideOutpassRequestInput(actor, pending.id, "approved")
    )

    assert result.error.code == OutpassErrorCode.FORBIDDEN
    assert request_repo.get_request(pending.id).is_pending


def test_concurrent_decisions_have_exactly_one_winner(request_repo, make_request):
    pending = make_request()
    use_case = DecideOutpassRequestUseCase(request_repo)
    supervisors = [Identity(id=uuid4(), role=UserRole.SUPERVISOR) for _ in range(8)]
    outcomes = [
        OutpassStatus.APPROVED if i % 2 == 0 else OutpassStatus.REJECTED
        for i in range(len(supervisors))
    ]
    barrier = threading.Barrier(len(supervisors))
    results = [None] * len(supervisors)

    def decide(index: int) -> None:
        barrier.wait()
        results[index] = use_case.execute(
            DecideOutpassRequestInput(
                supervisors[index], pending.id, outcomes[index]
            )
        )

    threads = [threading.Thread(target=decide, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    winners = [r for r in results if r.error is None]
    losers = [r for r in results if r.error is not None]
    assert len(winners) == 1
    assert all(r.error.code == OutpassErrorCode.INVALID_STATE for r in losers)

    stored = request_repo.get_request(pending.id)
    assert stored.status == winners[0].request.status
    assert stored.decided_by == winners[0].request.decided_by
