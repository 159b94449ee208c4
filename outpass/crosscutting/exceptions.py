# outpass/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas de servicios (errores internos)
===============================================================================

Objetivo
--------
Errores de infraestructura coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" (sin filtrar secretos ni SQL)

Nota
----
Los errores de NEGOCIO (validación, estado inválido, no aprobado...) NO son
excepciones: los casos de uso devuelven resultados tipados con OutpassErrorCode.
Acá viven solo las fallas de dependencias (DB) que atraviesan capas.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  OutpassServiceError + subclases

Responsabilidades:
  - Estandarizar fallas de infraestructura que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a RFC7807)
  - infrastructure/repositories/postgres/* (lanzan DatabaseError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class OutpassServiceError(Exception):
    """Base para fallas internas de servicios (no de reglas de negocio)."""

    error_code: str = "SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }


class DatabaseError(OutpassServiceError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class PoolNotInitializedError(DatabaseError):
    """Se pidió el pool antes de init_pool() (o después de close_pool())."""


class DatabaseConnectionError(DatabaseError):
    """No se pudo obtener una conexión del pool."""
