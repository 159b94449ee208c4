"""
In-Memory Audit Event Repository.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import List
from uuid import UUID

from ....domain.entities import AuditEvent


class InMemoryAuditEventRepository:
    """In-memory implementation of AuditEventRepository."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[AuditEvent] = []

    def record_event(self, event: AuditEvent) -> None:
        stored = replace(
            event,
            metadata=dict(event.metadata or {}),
            created_at=event.created_at or datetime.now(timezone.utc),
        )
        with self._lock:
            self._events.append(stored)

    def list_events(
        self,
        *,
        target_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditEvent]:
        with self._lock:
            events = [
                e for e in self._events if target_id is None or e.target_id == target_id
            ]
        # Más reciente primero (estable ante timestamps iguales).
        events.reverse()
        events.sort(key=lambda e: e.created_at, reverse=True)
        return events[offset : offset + limit]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
