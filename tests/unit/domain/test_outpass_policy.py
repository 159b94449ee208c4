"""
Name: Outpass Policy Tests

Responsibilities:
  - Cover the role/permission matrix for residents, supervisors and operators
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from outpass.domain import outpass_policy as policy
from outpass.domain.entities import OutpassRequest
from outpass.identity.users import Identity, UserRole

pytestmark = pytest.mark.unit

RESIDENT = Identity(id=uuid4(), role=UserRole.RESIDENT)
OTHER_RESIDENT = Identity(id=uuid4(), role=UserRole.RESIDENT)
SUPERVISOR = Identity(id=uuid4(), role=UserRole.SUPERVISOR)
OPERATOR = Identity(id=uuid4(), role=UserRole.CHECKPOINT_OPERATOR)


def _owned_by(identity: Identity) -> OutpassRequest:
    start = datetime(2025, 3, 1, 14, 0, tzinfo=timezone.utc)
    return OutpassRequest(
        id=uuid4(),
        requester_id=identity.id,
        reason="Compras",
        destination="Centro",
        window_start=start,
        window_end=start.replace(hour=18),
    )


@pytest.mark.parametrize(
    "check, allowed",
    [
        (policy.can_request_outpass, {UserRole.RESIDENT}),
        (policy.can_decide_outpass, {UserRole.SUPERVISOR}),
        (policy.can_record_checkpoint, {UserRole.CHECKPOINT_OPERATOR}),
        (policy.can_view_stats, {UserRole.SUPERVISOR}),
        (
            policy.can_list_by_status,
            {UserRole.SUPERVISOR, UserRole.CHECKPOINT_OPERATOR},
        ),
    ],
)
def test_role_matrix(check, allowed):
    for identity in (RESIDENT, SUPERVISOR, OPERATOR):
        assert check(identity) is (identity.role in allowed)
    assert check(None) is False


def test_resident_reads_only_own_data():
    assert policy.can_read_resident_data(RESIDENT, RESIDENT.id)
    assert not policy.can_read_resident_data(RESIDENT, OTHER_RESIDENT.id)


def test_staff_reads_any_resident():
    assert policy.can_read_resident_data(SUPERVISOR, RESIDENT.id)
    assert policy.can_read_resident_data(OPERATOR, RESIDENT.id)
    assert not policy.can_read_resident_data(None, RESIDENT.id)


def test_read_request_follows_ownership():
    request = _owned_by(RESIDENT)
    assert policy.can_read_request(RESIDENT, request)
    assert not policy.can_read_request(OTHER_RESIDENT, request)
    assert policy.can_read_request(OPERATOR, request)


def test_token_issued_to_owner_or_supervisor_only():
    request = _owned_by(RESIDENT)
    assert policy.can_issue_token(RESIDENT, request)
    assert policy.can_issue_token(SUPERVISOR, request)
    assert not policy.can_issue_token(OTHER_RESIDENT, request)
    assert not policy.can_issue_token(OPERATOR, request)
    assert not policy.can_issue_token(None, request)
