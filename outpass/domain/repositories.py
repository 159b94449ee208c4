"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing.

Collaborators
- domain.entities: OutpassRequest, OutpassStatus, OutpassLogEntry, AuditEvent
- infrastructure.repositories: postgres / in_memory implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.
- The request store must offer a conditional update (compare-and-swap on
  status) so two concurrent decisions can never both succeed.
- The log ledger is append-only: no update/delete methods exist on purpose.

Notes
- typing.Protocol for structural subtyping.
- Listings return concrete lists ordered as documented per method.
"""

from datetime import datetime
from typing import List, Optional, Protocol
from uuid import UUID

from .entities import AuditEvent, OutpassLogEntry, OutpassRequest, OutpassStatus


class OutpassRequestRepository(Protocol):
    """
    R: Interface for outpass request persistence (RequestStore).

    Implementations must provide:
      - Insert + lookup by id
      - Conditional status update (CAS)
      - Filtered listings, most recent first
      - Aggregate counts for the supervisor dashboard
    """

    def insert_request(self, request: OutpassRequest) -> OutpassRequest:
        """
        R: Persist a new request.

        Returns:
            The stored request (with created_at/updated_at populated).
        """
        ...

    def get_request(self, request_id: UUID) -> Optional[OutpassRequest]:
        """R: Get request by id (None if it does not exist)."""
        ...

    def update_request_if_status(
        self,
        request_id: UUID,
        *,
        expected_status: OutpassStatus,
        status: OutpassStatus,
        decided_by: UUID,
        decided_at: datetime,
    ) -> Optional[OutpassRequest]:
        """
        R: Atomically apply a decision only if the stored status still equals
        expected_status.

        Returns:
            The updated request on success; None on conflict (status changed)
            or if the request does not exist.
        """
        ...

    def list_requests(
        self,
        *,
        requester_id: UUID | None = None,
        status: OutpassStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[OutpassRequest]:
        """
        R: List requests filtered by requester and/or status.

        Returns:
            Requests ordered by created_at DESC (most recent first).
        """
        ...

    def count_requests(self, *, status: OutpassStatus | None = None) -> int:
        """R: Count requests (optionally filtered by status)."""
        ...

    def count_requesters(self) -> int:
        """R: Count distinct residents that ever requested an outpass."""
        ...


class OutpassLogRepository(Protocol):
    """
    R: Interface for the checkpoint log ledger (append-only).
    """

    def append_entry(self, entry: OutpassLogEntry) -> OutpassLogEntry:
        """R: Append a log entry. Never mutates existing entries."""
        ...

    def list_entries(
        self,
        *,
        request_id: UUID | None = None,
        resident_id: UUID | None = None,
        newest_first: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[OutpassLogEntry]:
        """
        R: Query entries by request and/or resident.

        Ordering:
            recorded_at ASC (creation order) by default;
            recorded_at DESC when newest_first=True ("recent activity" feed).
            offset skips that many entries in the chosen order.
        """
        ...


class AuditEventRepository(Protocol):
    """R: Interface for audit event persistence."""

    def record_event(self, event: AuditEvent) -> None:
        """R: Persist an audit event."""
        ...

    def list_events(
        self,
        *,
        target_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditEvent]:
        """R: List audit events ordered by created_at DESC."""
        ...
