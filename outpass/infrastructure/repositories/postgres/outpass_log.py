"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/outpass_log.py
============================================================
Class: PostgresOutpassLogRepository

Responsibilities:
  - Ledger append-only en PostgreSQL (tabla outpass_logs).
  - Orden estable: recorded_at y luego seq (columna identity = orden de
    inserción) para desempatar timestamps iguales.

Constraints:
  - Solo INSERT y SELECT. La FK a outpass_requests garantiza referencia válida;
    el estado "approved" lo exige el verificador antes del INSERT.
============================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import CheckpointDirection, OutpassLogEntry
from ._base import PostgresRepositoryBase


class PostgresOutpassLogRepository(PostgresRepositoryBase):
    _COLUMNS = """
        id, request_id, resident_id, direction, recorded_by,
        recorded_at, is_late, notes
    """

    @staticmethod
    def _row_to_entry(row: tuple) -> OutpassLogEntry:
        (
            entry_id,
            request_id,
            resident_id,
            direction,
            recorded_by,
            recorded_at,
            is_late,
            notes,
        ) = row
        return OutpassLogEntry(
            id=entry_id,
            request_id=request_id,
            resident_id=resident_id,
            direction=CheckpointDirection(direction),
            recorded_by=recorded_by,
            recorded_at=recorded_at,
            is_late=bool(is_late),
            notes=notes,
        )

    def append_entry(self, entry: OutpassLogEntry) -> OutpassLogEntry:
        row = self._fetchone(
            query=f"""
                INSERT INTO outpass_logs (
                    id, request_id, resident_id, direction, recorded_by,
                    recorded_at, is_late, notes
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {self._COLUMNS}
            """,
            params=[
                entry.id,
                entry.request_id,
                entry.resident_id,
                entry.direction.value,
                entry.recorded_by,
                entry.recorded_at,
                entry.is_late,
                entry.notes,
            ],
            context_msg="PostgresOutpassLogRepository: Failed to append entry",
            extra={"outpass_id": str(entry.request_id)},
        )
        if not row:
            raise DatabaseError("PostgresOutpassLogRepository: insert returned no row")
        return self._row_to_entry(row)

    def list_entries(
        self,
        *,
        request_id: UUID | None = None,
        resident_id: UUID | None = None,
        newest_first: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[OutpassLogEntry]:
        conditions: list[str] = []
        params: list[object] = []

        if request_id is not None:
            conditions.append("request_id = %s")
            params.append(request_id)
        if resident_id is not None:
            conditions.append("resident_id = %s")
            params.append(resident_id)

        where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        direction = "DESC" if newest_first else "ASC"

        rows = self._fetchall(
            query=f"""
                SELECT {self._COLUMNS}
                FROM outpass_logs
                {where_sql}
                ORDER BY recorded_at {direction}, seq {direction}
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, offset],
            context_msg="PostgresOutpassLogRepository: Failed to list entries",
            extra={"where_sql": where_sql, "limit": limit, "offset": offset},
        )
        return [self._row_to_entry(r) for r in rows]
