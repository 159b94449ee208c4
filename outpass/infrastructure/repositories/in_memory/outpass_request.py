"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/outpass_request.py
============================================================
Class: InMemoryOutpassRequestRepository

Responsibilities:
  - Almacenar pases en memoria (tests / local dev).
  - Implementar el compare-and-swap de estado bajo un único Lock:
    lectura del estado + escritura de la decisión son atómicas.
  - Mantener ordering determinístico alineado con Postgres:
      ORDER BY created_at DESC NULLS LAST (+ orden de inserción)

Collaborators:
  - domain.entities.OutpassRequest, OutpassStatus
  - domain.repositories.OutpassRequestRepository (contrato)

Constraints / Notes:
  - Thread-safe: toda lectura/escritura bajo Lock.
  - Copias: se devuelven copias (dataclasses.replace) para que un caller no
    pueda mutar el "estado guardado" por aliasing.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import OutpassRequest, OutpassStatus


class InMemoryOutpassRequestRepository:
    """Repositorio in-memory, thread-safe, para pases."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._requests: Dict[UUID, OutpassRequest] = {}
        self._sequence: Dict[UUID, int] = {}
        self._counter = count()

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _sort_key(self, request: OutpassRequest) -> tuple[float, int]:
        """created_at DESC NULLS LAST; empate => insertado último primero."""
        created = request.created_at or datetime.min.replace(tzinfo=timezone.utc)
        return (-created.timestamp(), -self._sequence[request.id])

    # =========================================================
    # Escritura
    # =========================================================
    def insert_request(self, request: OutpassRequest) -> OutpassRequest:
        now = self._now()
        stored = replace(
            request,
            created_at=request.created_at or now,
            updated_at=request.updated_at or now,
        )
        with self._lock:
            self._requests[stored.id] = stored
            self._sequence[stored.id] = next(self._counter)
        return replace(stored)

    def update_request_if_status(
        self,
        request_id: UUID,
        *,
        expected_status: OutpassStatus,
        status: OutpassStatus,
        decided_by: UUID,
        decided_at: datetime,
    ) -> Optional[OutpassRequest]:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None or current.status != expected_status:
                return None

            updated = replace(
                current,
                status=status,
                decided_by=decided_by,
                decided_at=decided_at,
                updated_at=self._now(),
            )
            self._requests[request_id] = updated
        return replace(updated)

    # =========================================================
    # Lectura
    # =========================================================
    def get_request(self, request_id: UUID) -> Optional[OutpassRequest]:
        with self._lock:
            request = self._requests.get(request_id)
        return None if request is None else replace(request)

    def list_requests(
        self,
        *,
        requester_id: UUID | None = None,
        status: OutpassStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[OutpassRequest]:
        with self._lock:
            candidates = [
                r
                for r in self._requests.values()
                if (requester_id is None or r.requester_id == requester_id)
                and (status is None or r.status == status)
            ]
            ordered = sorted(candidates, key=self._sort_key)
        return [replace(r) for r in ordered[offset : offset + limit]]

    def count_requests(self, *, status: OutpassStatus | None = None) -> int:
        with self._lock:
            return sum(
                1
                for r in self._requests.values()
                if status is None or r.status == status
            )

    def count_requesters(self) -> int:
        with self._lock:
            return len({r.requester_id for r in self._requests.values()})

    # -------------------------------------------------------------------------
    # Testing helpers
    # -------------------------------------------------------------------------
    def clear(self) -> None:
        with self._lock:
            self._requests.clear()
            self._sequence.clear()
