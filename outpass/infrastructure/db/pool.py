"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool PostgreSQL del proceso (RequestStore / LogLedger / auditoría)

Responsabilidades:
  - init_pool / get_pool / close_pool alrededor de psycopg_pool.ConnectionPool.
  - statement_timeout en cada conexión nueva.
  - Medir cada execute() y loguear las consultas lentas (solo el verbo SQL,
    nunca el texto ni los parámetros).
  - Convertir "sin pool" / "sin conexión" en DatabaseError (=> 503).

Colaboradores:
  - psycopg_pool.ConnectionPool
  - crosscutting.exceptions (PoolNotInitializedError, DatabaseConnectionError)
  - api/main.py (lifespan)
  - infrastructure/repositories/postgres/_base.py (get_pool)
===============================================================================
"""

from __future__ import annotations

import threading
import time
from contextlib import ExitStack, contextmanager
from typing import Iterator, Optional

from ...crosscutting.exceptions import DatabaseConnectionError, PoolNotInitializedError
from ...crosscutting.logger import logger


class PoolAlreadyInitializedError(RuntimeError):
    """init_pool() llamado dos veces en el mismo proceso."""


class TimedConnection:
    """Conexión con execute() medido; el resto de la API se delega."""

    def __init__(self, conn, *, slow_ms: float) -> None:
        self._conn = conn
        self._slow_ms = slow_ms

    def execute(self, query, params=None, **kwargs):
        started = time.perf_counter()
        try:
            return self._conn.execute(query, params, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            if elapsed_ms >= self._slow_ms:
                verb = str(query).split(None, 1)[0].upper() if str(query).strip() else "?"
                logger.warning(
                    "Consulta SQL lenta",
                    extra={"sql_verb": verb, "duration_ms": round(elapsed_ms, 2)},
                )

    def __getattr__(self, name: str):
        return getattr(self._conn, name)


class OutpassPool:
    """Envuelve el ConnectionPool: `with pool.connection() as conn:`."""

    def __init__(self, inner, *, slow_ms: float = 250) -> None:
        self._inner = inner
        self._slow_ms = slow_ms

    @contextmanager
    def connection(self, **kwargs) -> Iterator[TimedConnection]:
        with ExitStack() as stack:
            try:
                conn = stack.enter_context(self._inner.connection(**kwargs))
            except Exception as exc:
                raise DatabaseConnectionError(
                    "No se pudo obtener una conexión del pool.", original_error=exc
                ) from exc
            yield TimedConnection(conn, slow_ms=self._slow_ms)

    def close(self) -> None:
        self._inner.close()


_pool: Optional[OutpassPool] = None
_pool_lock = threading.Lock()


def _configure_connection(conn) -> None:
    from ...crosscutting.config import get_settings

    timeout_ms = int(get_settings().db_statement_timeout_ms)
    if timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {timeout_ms}")
        conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> OutpassPool:
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("El pool de outpass ya está abierto.")

        # Import diferido: en APP_ENV=test nunca se abre un pool.
        from psycopg_pool import ConnectionPool

        from ...crosscutting.config import get_settings

        logger.info(
            "Abriendo pool DB",
            extra={"min_size": min_size, "max_size": max_size},
        )
        _pool = OutpassPool(
            ConnectionPool(
                conninfo=database_url,
                min_size=min_size,
                max_size=max_size,
                configure=_configure_connection,
                open=True,
            ),
            slow_ms=get_settings().db_slow_query_ms,
        )
        return _pool


def get_pool() -> OutpassPool:
    if _pool is None:
        raise PoolNotInitializedError("El pool DB no está inicializado.")
    return _pool


def close_pool() -> None:
    """Idempotente. Los errores al cerrar se loguean y no se propagan."""
    global _pool

    with _pool_lock:
        pool, _pool = _pool, None
    if pool is None:
        return

    logger.info("Cerrando pool DB")
    try:
        pool.close()
    except Exception as exc:
        logger.warning("Error cerrando el pool DB", extra={"error": str(exc)})
