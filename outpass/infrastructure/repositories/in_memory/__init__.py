"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .audit_event import InMemoryAuditEventRepository
from .outpass_log import InMemoryOutpassLogRepository
from .outpass_request import InMemoryOutpassRequestRepository

__all__ = [
    "InMemoryAuditEventRepository",
    "InMemoryOutpassLogRepository",
    "InMemoryOutpassRequestRepository",
]
