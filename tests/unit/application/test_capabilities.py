"""
Name: Role Capabilities Tests

Responsibilities:
  - Validate capabilities_for() picks the class by role
  - Validate each capability only exposes its role's operations
"""

from datetime import datetime, timezone

import pytest

from outpass.application.capabilities import (
    CheckpointOperatorCapabilities,
    ResidentCapabilities,
    SupervisorCapabilities,
    capabilities_for,
)
from outpass.application.checkpoint_codec import encode_token
from outpass.application.usecases.outpass import OutpassErrorCode
from outpass.domain.entities import OutpassStatus

pytestmark = pytest.mark.unit


def test_capabilities_for_picks_class_by_role(services, resident, supervisor, operator):
    assert isinstance(capabilities_for(resident, services), ResidentCapabilities)
    assert isinstance(capabilities_for(supervisor, services), SupervisorCapabilities)
    assert isinstance(
        capabilities_for(operator, services), CheckpointOperatorCapabilities
    )


def test_no_identity_means_no_capabilities(services):
    assert capabilities_for(None, services) is None


def test_operations_are_bound_to_role():
    assert not hasattr(ResidentCapabilities, "decide")
    assert not hasattr(ResidentCapabilities, "scan")
    assert not hasattr(SupervisorCapabilities, "scan")
    assert not hasattr(SupervisorCapabilities, "request_outpass")
    assert not hasattr(CheckpointOperatorCapabilities, "decide")
    assert not hasattr(CheckpointOperatorCapabilities, "stats")


def test_capabilities_carry_identity(services, resident):
    caps = capabilities_for(resident, services)
    created = caps.request_outpass(
        reason="Compras",
        destination="Centro",
        window_start=datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc),
        window_end=datetime(2025, 3, 1, 11, 0, tzinfo=timezone.utc),
    ).request

    assert created.requester_id == resident.id
    assert [r.id for r in caps.my_outpasses().requests] == [created.id]
    assert caps.get_outpass(created.id).request == created


def test_supervisor_queues_and_stats(services, make_request, supervisor):
    pending = make_request()
    caps = capabilities_for(supervisor, services)

    assert [r.id for r in caps.pending().requests] == [pending.id]
    caps.reject(pending.id)
    assert caps.pending().requests == []
    assert [r.status for r in caps.history().requests] == [OutpassStatus.REJECTED]
    assert caps.stats().stats.rejected_requests == 1


def test_operator_lists_approved(services, make_request, operator):
    approved = make_request(status=OutpassStatus.APPROVED)
    make_request()
    caps = capabilities_for(operator, services)

    assert [r.id for r in caps.approved().requests] == [approved.id]


def test_supervisor_reads_one_resident(
    services, make_request, supervisor, resident, other_resident
):
    own = make_request(requester=resident)
    make_request(requester=other_resident)
    caps = capabilities_for(supervisor, services)

    assert [r.id for r in caps.outpasses_of(resident.id).requests] == [own.id]


def test_movements_visible_by_role(
    services, make_request, resident, other_resident, supervisor, operator
):
    approved = make_request(status=OutpassStatus.APPROVED)
    entry = (
        capabilities_for(operator, services)
        .scan(encode_token(approved), "exit")
        .entry
    )

    assert [e.id for e in capabilities_for(resident, services).my_logs().entries] == [
        entry.id
    ]
    assert capabilities_for(other_resident, services).my_logs().entries == []
    history = capabilities_for(supervisor, services).logs(request_id=approved.id)
    assert [e.id for e in history.entries] == [entry.id]


def test_use_cases_still_guard_roles(services, make_request, resident):
    # Un cliente que arma la capacidad equivocada igual recibe FORBIDDEN.
    pending = make_request()
    wrong = SupervisorCapabilities(resident, services)
    assert wrong.approve(pending.id).error.code == OutpassErrorCode.FORBIDDEN
