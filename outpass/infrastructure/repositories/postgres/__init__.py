"""
PostgreSQL Repository Implementations.

Raw SQL over a psycopg connection pool.
"""

from .audit_event import PostgresAuditEventRepository
from .outpass_log import PostgresOutpassLogRepository
from .outpass_request import PostgresOutpassRequestRepository

__all__ = [
    "PostgresAuditEventRepository",
    "PostgresOutpassLogRepository",
    "PostgresOutpassRequestRepository",
]
