"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/outpass_request.py
============================================================
Class: PostgresOutpassRequestRepository

Responsibilities:
  - Persistir pases en PostgreSQL (tabla outpass_requests, SQL crudo).
  - Decisión atómica: UPDATE ... WHERE id = %s AND status = %s RETURNING.
    Sin fila devuelta => conflicto (otro supervisor ganó) o id inexistente.
  - Listados determinísticos: ORDER BY created_at DESC NULLS LAST, id DESC.
  - Conteos para el dashboard.

Collaborators:
  - domain.entities.OutpassRequest, OutpassStatus
  - PostgresRepositoryBase (_fetchone/_fetchall)

Constraints:
  - Queries siempre parametrizadas; where_sql se arma solo desde este módulo.
  - Nunca DELETE: los pases se conservan para trazabilidad.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import OutpassRequest, OutpassStatus
from ._base import PostgresRepositoryBase


class PostgresOutpassRequestRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del RequestStore."""

    _COLUMNS = """
        id, requester_id, reason, destination, window_start, window_end,
        status, decided_by, decided_at, created_at, updated_at
    """

    _ORDER_BY = "ORDER BY created_at DESC NULLS LAST, id DESC"

    @staticmethod
    def _row_to_request(row: tuple) -> OutpassRequest:
        (
            request_id,
            requester_id,
            reason,
            destination,
            window_start,
            window_end,
            status,
            decided_by,
            decided_at,
            created_at,
            updated_at,
        ) = row

        return OutpassRequest(
            id=request_id,
            requester_id=requester_id,
            reason=reason,
            destination=destination,
            window_start=window_start,
            window_end=window_end,
            status=OutpassStatus(status),
            decided_by=decided_by,
            decided_at=decided_at,
            created_at=created_at,
            updated_at=updated_at,
        )

    @staticmethod
    def _where(
        requester_id: UUID | None, status: OutpassStatus | None
    ) -> tuple[str, list[object]]:
        conditions: list[str] = []
        params: list[object] = []

        if requester_id is not None:
            conditions.append("requester_id = %s")
            params.append(requester_id)
        if status is not None:
            conditions.append("status = %s")
            params.append(status.value)

        where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        return where_sql, params

    # =========================================================
    # Escritura
    # =========================================================
    def insert_request(self, request: OutpassRequest) -> OutpassRequest:
        row = self._fetchone(
            query=f"""
                INSERT INTO outpass_requests (
                    id, requester_id, reason, destination,
                    window_start, window_end, status, decided_by, decided_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {self._COLUMNS}
            """,
            params=[
                request.id,
                request.requester_id,
                request.reason,
                request.destination,
                request.window_start,
                request.window_end,
                request.status.value,
                request.decided_by,
                request.decided_at,
            ],
            context_msg="PostgresOutpassRequestRepository: Failed to insert request",
            extra={"outpass_id": str(request.id)},
        )
        if not row:
            raise DatabaseError(
                "PostgresOutpassRequestRepository: insert returned no row"
            )
        return self._row_to_request(row)

    def update_request_if_status(
        self,
        request_id: UUID,
        *,
        expected_status: OutpassStatus,
        status: OutpassStatus,
        decided_by: UUID,
        decided_at: datetime,
    ) -> Optional[OutpassRequest]:
        row = self._fetchone(
            query=f"""
                UPDATE outpass_requests
                SET status = %s, decided_by = %s, decided_at = %s, updated_at = NOW()
                WHERE id = %s AND status = %s
                RETURNING {self._COLUMNS}
            """,
            params=[
                status.value,
                decided_by,
                decided_at,
                request_id,
                expected_status.value,
            ],
            context_msg="PostgresOutpassRequestRepository: Failed to decide request",
            extra={"outpass_id": str(request_id), "status": status.value},
        )
        return None if not row else self._row_to_request(row)

    # =========================================================
    # Lectura
    # =========================================================
    def get_request(self, request_id: UUID) -> Optional[OutpassRequest]:
        row = self._fetchone(
            query=f"SELECT {self._COLUMNS} FROM outpass_requests WHERE id = %s",
            params=[request_id],
            context_msg="PostgresOutpassRequestRepository: Failed to get request",
            extra={"outpass_id": str(request_id)},
        )
        return None if not row else self._row_to_request(row)

    def list_requests(
        self,
        *,
        requester_id: UUID | None = None,
        status: OutpassStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[OutpassRequest]:
        where_sql, params = self._where(requester_id, status)
        rows = self._fetchall(
            query=f"""
                SELECT {self._COLUMNS}
                FROM outpass_requests
                {where_sql}
                {self._ORDER_BY}
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, offset],
            context_msg="PostgresOutpassRequestRepository: Failed to list requests",
            extra={"where_sql": where_sql, "limit": limit, "offset": offset},
        )
        return [self._row_to_request(r) for r in rows]

    def count_requests(self, *, status: OutpassStatus | None = None) -> int:
        where_sql, params = self._where(None, status)
        row = self._fetchone(
            query=f"SELECT COUNT(*) FROM outpass_requests {where_sql}",
            params=params,
            context_msg="PostgresOutpassRequestRepository: Failed to count requests",
            extra={"status": status.value if status else None},
        )
        return int(row[0]) if row else 0

    def count_requesters(self) -> int:
        row = self._fetchone(
            query="SELECT COUNT(DISTINCT requester_id) FROM outpass_requests",
            params=[],
            context_msg="PostgresOutpassRequestRepository: Failed to count requesters",
            extra={},
        )
        return int(row[0]) if row else 0
