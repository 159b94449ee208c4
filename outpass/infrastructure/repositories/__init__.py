"""
============================================================
TARJETA CRC — infrastructure/repositories/__init__.py
============================================================
Responsibilities:
  - Exponer implementaciones concretas (Postgres e InMemory) en un único
    punto de importación para el container.

Policy:
  - Solo re-exporta símbolos; sin side effects.
============================================================
"""

from .in_memory import (
    InMemoryAuditEventRepository,
    InMemoryOutpassLogRepository,
    InMemoryOutpassRequestRepository,
)
from .postgres import (
    PostgresAuditEventRepository,
    PostgresOutpassLogRepository,
    PostgresOutpassRequestRepository,
)

__all__ = [
    # Postgres
    "PostgresAuditEventRepository",
    "PostgresOutpassLogRepository",
    "PostgresOutpassRequestRepository",
    # In-memory
    "InMemoryAuditEventRepository",
    "InMemoryOutpassLogRepository",
    "InMemoryOutpassRequestRepository",
]
