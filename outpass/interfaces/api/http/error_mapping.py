"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir OutpassError (casos de uso) a AppHTTPException RFC7807.
  - Centralizar el mapeo para que los routers no repitan el switch.
  - Mantener el dominio libre de HTTP.

Mapeo:
  - VALIDATION_ERROR -> 422
  - FORBIDDEN        -> 403
  - NOT_FOUND        -> 404 (resource + id)
  - INVALID_STATE    -> 409
  - NOT_APPROVED     -> 409
  - MALFORMED_TOKEN  -> 400

Colaboradores:
  - application.usecases.outpass (OutpassError, OutpassErrorCode)
  - crosscutting.error_responses (factories)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from outpass.application.usecases.outpass import OutpassError, OutpassErrorCode
from outpass.crosscutting.error_responses import (
    forbidden,
    internal_error,
    invalid_state,
    malformed_token,
    not_approved,
    not_found,
    validation_error,
)


def raise_outpass_error(
    error: OutpassError,
    *,
    resource: str = "Outpass",
    resource_id: UUID | None = None,
) -> None:
    """Traduce OutpassError -> HTTP (siempre lanza)."""
    if error.code == OutpassErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if error.code == OutpassErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == OutpassErrorCode.NOT_FOUND:
        raise not_found(resource, str(resource_id or "unknown"))
    if error.code == OutpassErrorCode.INVALID_STATE:
        raise invalid_state(error.message)
    if error.code == OutpassErrorCode.NOT_APPROVED:
        raise not_approved(error.message)
    if error.code == OutpassErrorCode.MALFORMED_TOKEN:
        raise malformed_token(error.message)

    # Código nuevo sin mapear
    raise internal_error(error.message)
