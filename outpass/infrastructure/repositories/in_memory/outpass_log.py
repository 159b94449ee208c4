"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/outpass_log.py
============================================================
Class: InMemoryOutpassLogRepository

Responsibilities:
  - Ledger append-only de movimientos del checkpoint (tests / local dev).
  - Filtrar por pase y/o residente.
  - Ordenar por recorded_at (ASC por defecto, DESC para el feed reciente),
    desempatando por orden de inserción.

Constraints:
  - No existen update/delete: las entradas son inmutables (frozen).
  - Appends concurrentes son independientes; el Lock solo protege la lista.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import List
from uuid import UUID

from ....domain.entities import OutpassLogEntry, ensure_utc


class InMemoryOutpassLogRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._entries: List[OutpassLogEntry] = []

    def append_entry(self, entry: OutpassLogEntry) -> OutpassLogEntry:
        with self._lock:
            self._entries.append(entry)
        return entry

    def list_entries(
        self,
        *,
        request_id: UUID | None = None,
        resident_id: UUID | None = None,
        newest_first: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[OutpassLogEntry]:
        with self._lock:
            indexed = [
                (position, e)
                for position, e in enumerate(self._entries)
                if (request_id is None or e.request_id == request_id)
                and (resident_id is None or e.resident_id == resident_id)
            ]

        indexed.sort(
            key=lambda item: (ensure_utc(item[1].recorded_at), item[0]),
            reverse=newest_first,
        )
        return [e for _, e in indexed[offset : offset + limit]]

    # -------------------------------------------------------------------------
    # Testing helpers
    # -------------------------------------------------------------------------
    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
