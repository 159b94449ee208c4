"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/audit_event.py
============================================================
Class: PostgresAuditEventRepository

Responsibilities:
  - Persistir eventos de auditoría (tabla audit_events, metadata JSONB).
  - Listar eventos por target (created_at DESC, id DESC).

Notes:
  - Si el INSERT falla se propaga DatabaseError; emit_audit_event lo traga.
============================================================
"""

from __future__ import annotations

from uuid import UUID

from psycopg.types.json import Json

from ....domain.entities import AuditEvent
from ._base import PostgresRepositoryBase


class PostgresAuditEventRepository(PostgresRepositoryBase):
    def record_event(self, event: AuditEvent) -> None:
        self._fetchone(
            query="""
                INSERT INTO audit_events (id, actor, action, target_id, metadata)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING id
            """,
            params=[
                event.id,
                event.actor,
                event.action,
                event.target_id,
                Json(event.metadata or {}),
            ],
            context_msg="PostgresAuditEventRepository: Failed to record audit event",
            extra={"action": event.action, "actor": event.actor},
        )

    def list_events(
        self,
        *,
        target_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditEvent]:
        if limit <= 0:
            return []

        where_sql = "WHERE target_id = %s" if target_id is not None else ""
        params: list[object] = [target_id] if target_id is not None else []

        rows = self._fetchall(
            query=f"""
                SELECT id, actor, action, target_id, metadata, created_at
                FROM audit_events
                {where_sql}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, max(0, offset)],
            context_msg="PostgresAuditEventRepository: Failed to list audit events",
            extra={"target_id": str(target_id) if target_id else None},
        )
        return [
            AuditEvent(
                id=event_id,
                actor=actor,
                action=action,
                target_id=event_target,
                metadata=metadata or {},
                created_at=created_at,
            )
            for event_id, actor, action, event_target, metadata, created_at in rows
        ]
