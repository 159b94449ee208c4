"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/_base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
  - Dar a cada repositorio Postgres una conexión del pool (el global o uno
    inyectado en tests).
  - Envolver toda falla de SQL en DatabaseError (=> 503) dejando el contexto
    en el log; el texto SQL y los parámetros no se loguean.

Collaborators:
  - infrastructure/db/pool (OutpassPool, get_pool)
  - crosscutting.exceptions.DatabaseError
============================================================
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ...db.pool import OutpassPool, get_pool


class PostgresRepositoryBase:
    def __init__(self, pool: Optional[OutpassPool] = None):
        self._pool = pool

    def _run(
        self,
        query: str,
        params: Iterable[object],
        read: Callable[[Any], Any],
        context_msg: str,
        extra: dict,
    ) -> Any:
        pool = self._pool or get_pool()
        try:
            with pool.connection() as conn:
                return read(conn.execute(query, tuple(params)))
        except DatabaseError:
            raise
        except Exception as exc:
            logger.error(context_msg, extra={**extra, "error_type": type(exc).__name__})
            raise DatabaseError(context_msg, original_error=exc) from exc

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        return self._run(query, params, lambda cur: cur.fetchone(), context_msg, extra)

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        return self._run(query, params, lambda cur: cur.fetchall(), context_msg, extra)
