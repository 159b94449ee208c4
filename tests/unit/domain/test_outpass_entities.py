"""
Name: Outpass Domain Entity Tests

Responsibilities:
  - Validate the status machine (PENDING -> APPROVED | REJECTED, terminal)
  - Validate lateness rule and token projection
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from outpass.domain.entities import (
    ALLOWED_TRANSITIONS,
    CheckpointDirection,
    CheckpointToken,
    OutpassRequest,
    OutpassStatus,
    ensure_utc,
    is_late_return,
)

pytestmark = pytest.mark.unit

WINDOW_END = datetime(2025, 3, 1, 18, 0, tzinfo=timezone.utc)


def _request(status: OutpassStatus = OutpassStatus.PENDING) -> OutpassRequest:
    return OutpassRequest(
        id=uuid4(),
        requester_id=uuid4(),
        reason="Turno médico",
        destination="Hospital",
        window_start=WINDOW_END - timedelta(hours=4),
        window_end=WINDOW_END,
        status=status,
    )


def test_new_request_defaults_to_pending():
    request = _request()
    assert request.status == OutpassStatus.PENDING
    assert request.is_pending
    assert not request.is_approved
    assert request.decided_by is None


@pytest.mark.parametrize("target", [OutpassStatus.APPROVED, OutpassStatus.REJECTED])
def test_pending_can_be_decided(target):
    assert _request().can_transition_to(target)


@pytest.mark.parametrize("current", [OutpassStatus.APPROVED, OutpassStatus.REJECTED])
def test_decided_statuses_are_terminal(current):
    request = _request(current)
    assert ALLOWED_TRANSITIONS[current] == frozenset()
    for target in OutpassStatus:
        assert not request.can_transition_to(target)


def test_pending_cannot_transition_to_pending():
    assert not _request().can_transition_to(OutpassStatus.PENDING)


def test_late_only_for_return_after_window_end():
    after = WINDOW_END + timedelta(minutes=1)
    assert is_late_return(CheckpointDirection.RETURN, after, WINDOW_END)
    assert not is_late_return(CheckpointDirection.EXIT, after, WINDOW_END)


def test_return_exactly_at_window_end_is_not_late():
    assert not is_late_return(CheckpointDirection.RETURN, WINDOW_END, WINDOW_END)


def test_lateness_compares_in_utc():
    minus_three = timezone(timedelta(hours=-3))
    # 15:30 en UTC-3 == 18:30 UTC
    local = datetime(2025, 3, 1, 15, 30, tzinfo=minus_three)
    assert is_late_return(CheckpointDirection.RETURN, local, WINDOW_END)


def test_ensure_utc_treats_naive_as_utc():
    naive = datetime(2025, 3, 1, 10, 0)
    assert ensure_utc(naive) == datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_token_projection_copies_identity_fields():
    request = _request(OutpassStatus.APPROVED)
    token = CheckpointToken.from_request(request)
    assert token.request_id == request.id
    assert token.requester_id == request.requester_id
    assert token.destination == request.destination
    assert token.window_end == WINDOW_END
