"""
Name: PostgreSQL Repository Unit Tests (mocked pool)

Responsibilities:
  - Validate SQL shape for the conditional decision update
  - Validate row mapping and DatabaseError wrapping without a database
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from outpass.crosscutting.exceptions import DatabaseError
from outpass.domain.entities import CheckpointDirection, OutpassStatus
from outpass.infrastructure.repositories.postgres import (
    PostgresOutpassLogRepository,
    PostgresOutpassRequestRepository,
)

pytestmark = pytest.mark.unit

T0 = datetime(2025, 3, 1, 14, 0, tzinfo=timezone.utc)


def _pool_returning(*, one=None, many=None, error: Exception | None = None):
    conn = MagicMock()
    if error is not None:
        conn.execute.side_effect = error
    else:
        conn.execute.return_value.fetchone.return_value = one
        conn.execute.return_value.fetchall.return_value = many or []

    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    pool.connection.return_value.__exit__.return_value = False
    return pool, conn


def _request_row(request_id, status="approved"):
    return (
        request_id,
        uuid4(),
        "Visita",
        "Ciudad",
        T0,
        T0.replace(hour=18),
        status,
        uuid4(),
        T0,
        T0,
        T0,
    )


def test_decision_update_is_conditional_on_expected_status():
    request_id = uuid4()
    pool, conn = _pool_returning(one=_request_row(request_id))
    repo = PostgresOutpassRequestRepository(pool=pool)

    updated = repo.update_request_if_status(
        request_id,
        expected_status=OutpassStatus.PENDING,
        status=OutpassStatus.APPROVED,
        decided_by=uuid4(),
        decided_at=T0,
    )

    sql, params = conn.execute.call_args.args
    assert "WHERE id = %s AND status = %s" in sql
    assert "RETURNING" in sql
    assert params[0] == "approved"
    assert params[-2:] == (request_id, "pending")
    assert updated.status == OutpassStatus.APPROVED


def test_lost_decision_returns_none():
    pool, _ = _pool_returning(one=None)
    repo = PostgresOutpassRequestRepository(pool=pool)

    assert (
        repo.update_request_if_status(
            uuid4(),
            expected_status=OutpassStatus.PENDING,
            status=OutpassStatus.REJECTED,
            decided_by=uuid4(),
            decided_at=T0,
        )
        is None
    )


def test_list_by_status_binds_enum_value():
    pool, conn = _pool_returning(many=[])
    repo = PostgresOutpassRequestRepository(pool=pool)

    repo.list_requests(status=OutpassStatus.PENDING, limit=5, offset=10)

    sql, params = conn.execute.call_args.args
    assert "status = %s" in sql
    assert "ORDER BY created_at DESC" in sql
    assert params == ("pending", 5, 10)


def test_driver_errors_become_database_error():
    pool, _ = _pool_returning(error=RuntimeError("connection refused"))
    repo = PostgresOutpassRequestRepository(pool=pool)

    with pytest.raises(DatabaseError) as excinfo:
        repo.get_request(uuid4())

    assert isinstance(excinfo.value.original_error, RuntimeError)
    assert excinfo.value.error_id


def test_log_rows_map_to_entries_in_requested_order():
    request_id = uuid4()
    row = (uuid4(), request_id, uuid4(), "return", uuid4(), T0, True, None)
    pool, conn = _pool_returning(many=[row])
    repo = PostgresOutpassLogRepository(pool=pool)

    entries = repo.list_entries(
        request_id=request_id, newest_first=True, limit=3, offset=6
    )

    sql, params = conn.execute.call_args.args
    assert "ORDER BY recorded_at DESC, seq DESC" in sql
    assert "LIMIT %s OFFSET %s" in sql
    assert params == (request_id, 3, 6)
    assert entries[0].direction == CheckpointDirection.RETURN
    assert entries[0].is_late is True
