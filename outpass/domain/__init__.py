"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Evitar imports profundos y acoplamientos innecesarios.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    AuditEvent,
    CheckpointDirection,
    CheckpointToken,
    OutpassLogEntry,
    OutpassRequest,
    OutpassStats,
    OutpassStatus,
)
from .repositories import (
    AuditEventRepository,
    OutpassLogRepository,
    OutpassRequestRepository,
)

__all__ = [
    # Entities
    "AuditEvent",
    "CheckpointDirection",
    "CheckpointToken",
    "OutpassLogEntry",
    "OutpassRequest",
    "OutpassStats",
    "OutpassStatus",
    # Repositories
    "AuditEventRepository",
    "OutpassLogRepository",
    "OutpassRequestRepository",
]
