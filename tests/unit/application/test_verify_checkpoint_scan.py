"""
Name: Checkpoint Verification Use Case Tests

Responsibilities:
  - Validate decode -> verify pipeline for scanned and typed tokens
  - Validate lateness, approval checks and append-only ledger writes
  - Cover the full resident -> supervisor -> checkpoint scenario
"""

import json
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from outpass.application.capabilities import capabilities_for
from outpass.application.checkpoint_codec import decode_token, encode_token
from outpass.application.usecases.checkpoint import (
    VerifyCheckpointScanInput,
    VerifyCheckpointScanUseCase,
)
from outpass.application.usecases.outpass import OutpassErrorCode
from outpass.domain.entities import CheckpointDirection, CheckpointToken, OutpassStatus

pytestmark = pytest.mark.unit


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 3, 1, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def verifier(request_repo, log_repo, clock) -> VerifyCheckpointScanUseCase:
    return VerifyCheckpointScanUseCase(request_repo, log_repo, clock=clock)


def _scan(verifier, actor, payload, direction="exit", notes=None):
    return verifier.execute(
        VerifyCheckpointScanInput(
            actor=actor, payload=payload, direction=direction, notes=notes
        )
    )


def test_exit_within_window_is_recorded_not_late(
    verifier, make_request, operator, log_repo, clock
):
    approved = make_request(status=OutpassStatus.APPROVED)
    clock.set(at(14, 10))

    result = _scan(verifier, operator, encode_token(approved), "exit")

    assert result.error is None
    entry = result.entry
    assert entry.request_id == approved.id
    assert entry.resident_id == approved.requester_id
    assert entry.recorded_by == operator.id
    assert entry.recorded_at == at(14, 10)
    assert entry.direction == CheckpointDirection.EXIT
    assert entry.is_late is False
    assert log_repo.list_entries(request_id=approved.id) == [entry]


def test_return_after_window_end_is_late(verifier, make_request, operator, clock):
    approved = make_request(status=OutpassStatus.APPROVED)
    clock.set(at(19, 0))

    result = _scan(verifier, operator, encode_token(approved), "return")

    assert result.entry.is_late is True


def test_exit_after_window_end_is_not_late(verifier, make_request, operator, clock):
    approved = make_request(status=OutpassStatus.APPROVED)
    clock.set(at(19, 0))

    result = _scan(verifier, operator, encode_token(approved), "exit")

    assert result.entry.is_late is False


@pytest.mark.parametrize("status", [OutpassStatus.PENDING, OutpassStatus.REJECTED])
def test_unapproved_request_is_rejected_without_log(
    verifier, make_request, operator, log_repo, status
):
    request = make_request(status=status)

    result = _scan(verifier, operator, encode_token(request))

    assert result.error.code == OutpassErrorCode.NOT_APPROVED
    assert log_repo.list_entries() == []


def test_unknown_request_is_not_found(verifier, make_request, operator, log_repo):
    approved = make_request(status=OutpassStatus.APPROVED)
    data = json.loads(encode_token(approved))
    missing = uuid4()
    data["request_id"] = str(missing)

    result = _scan(verifier, operator, data)

    assert result.error.code == OutpassErrorCode.NOT_FOUND
    assert result.request_id == missing
    assert log_repo.list_entries() == []


@pytest.mark.parametrize("payload", ["", "garbage", "{}", b"\xff", "[]"])
def test_malformed_payload_never_writes(verifier, operator, log_repo, payload):
    result = _scan(verifier, operator, payload)

    assert result.error.code == OutpassErrorCode.MALFORMED_TOKEN
    assert log_repo.list_entries() == []


def test_oversized_payload_is_malformed(request_repo, log_repo, operator):
    verifier = VerifyCheckpointScanUseCase(request_repo, log_repo, max_token_chars=10)
    result = _scan(verifier, operator, "x" * 11)
    assert result.error.code == OutpassErrorCode.MALFORMED_TOKEN


def test_token_with_foreign_requester_is_malformed(
    verifier, make_request, operator, log_repo
):
    approved = make_request(status=OutpassStatus.APPROVED)
    data = json.loads(encode_token(approved))
    data["requester_id"] = str(uuid4())

    result = _scan(verifier, operator, data)

    assert result.error.code == OutpassErrorCode.MALFORMED_TOKEN
    assert log_repo.list_entries() == []


def test_rejection_after_token_issue_blocks_scan(
    verifier, make_request, operator, request_repo, supervisor, clock
):
    approved = make_request(status=OutpassStatus.APPROVED)
    token = encode_token(approved)
    request_repo.update_request_if_status(
        approved.id,
        expected_status=OutpassStatus.APPROVED,
        status=OutpassStatus.REJECTED,
        decided_by=supervisor.id,
        decided_at=clock.now,
    )

    result = _scan(verifier, operator, token)

    assert result.error.code == OutpassErrorCode.NOT_APPROVED


@pytest.mark.parametrize("fixture_name", ["resident", "supervisor"])
def test_only_operators_can_scan(
    request, verifier, make_request, log_repo, fixture_name
):
    approved = make_request(status=OutpassStatus.APPROVED)
    actor = request.getfixturevalue(fixture_name)

    result = _scan(verifier, actor, encode_token(approved))

    assert result.error.code == OutpassErrorCode.FORBIDDEN
    assert log_repo.list_entries() == []


def test_invalid_direction_is_validation_error(verifier, make_request, operator):
    approved = make_request(status=OutpassStatus.APPROVED)
    result = _scan(verifier, operator, encode_token(approved), direction="sideways")
    assert result.error.code == OutpassErrorCode.VALIDATION_ERROR


def test_notes_are_trimmed_and_limited(request_repo, log_repo, make_request, operator):
    approved = make_request(status=OutpassStatus.APPROVED)
    verifier = VerifyCheckpointScanUseCase(request_repo, log_repo, max_notes_chars=5)
    token = encode_token(approved)

    ok = _scan(verifier, operator, token, notes="  bolso  ")
    too_long = _scan(verifier, operator, token, notes="mochila grande")

    assert ok.entry.notes == "bolso"
    assert too_long.error.code == OutpassErrorCode.VALIDATION_ERROR


def test_direction_ordering_is_not_enforced(verifier, make_request, operator):
    approved = make_request(status=OutpassStatus.APPROVED)
    token = encode_token(approved)

    first = _scan(verifier, operator, token, "return")
    second = _scan(verifier, operator, token, "return")

    assert first.error is None and second.error is None


def test_verify_accepts_decoded_token(verifier, make_request, operator):
    approved = make_request(status=OutpassStatus.APPROVED)
    token = CheckpointToken.from_request(approved)

    result = verifier.verify(operator, token, CheckpointDirection.EXIT)

    assert result.entry.request_id == approved.id


def test_scan_never_mutates_request(verifier, make_request, operator, request_repo):
    approved = make_request(status=OutpassStatus.APPROVED)
    _scan(verifier, operator, encode_token(approved), "exit")
    assert request_repo.get_request(approved.id) == approved


# =============================================================================
# Escenario completo
# =============================================================================


def test_full_outpass_scenario(services, clock, resident, supervisor, operator):
    resident_caps = capabilities_for(resident, services)
    supervisor_caps = capabilities_for(supervisor, services)
    operator_caps = capabilities_for(operator, services)

    created = resident_caps.request_outpass(
        reason="Visita familiar",
        destination="Ciudad",
        window_start=at(14, 0),
        window_end=at(18, 0),
    ).request
    assert created.status == OutpassStatus.PENDING

    decided = supervisor_caps.approve(created.id)
    assert decided.request.status == OutpassStatus.APPROVED

    token = resident_caps.checkpoint_token(created.id).token
    assert decode_token(token).request_id == created.id

    clock.set(at(14, 10))
    exit_entry = operator_caps.scan(token, "exit").entry
    clock.set(at(19, 0))
    return_entry = operator_caps.scan(token, "return").entry

    assert exit_entry.is_late is False
    assert return_entry.is_late is True

    history = supervisor_caps.logs(request_id=created.id).entries
    assert [e.id for e in history] == [exit_entry.id, return_entry.id]
    assert [e.direction for e in history] == [
        CheckpointDirection.EXIT,
        CheckpointDirection.RETURN,
    ]
