# outpass/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Errores HTTP como Problem Details (RFC 7807)
===============================================================================

Todos los errores de la API salen como application/problem+json con un
`code` estable. Los clientes (app del residente, panel del supervisor, lector
del checkpoint) reaccionan por `code`, no por texto: por ejemplo
NOT_APPROVED => "pase no aprobado" en la puerta.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  ErrorCode + AppHTTPException + problem_body / problem_response

Responsabilidades:
  - Fijar el status HTTP de cada ErrorCode en una sola tabla (_STATUS_BY_CODE)
  - Armar el cuerpo RFC 7807 (también para el middleware de body limit)
  - Factories por tipo de error para routers y error_mapping

Colaboradores:
  - interfaces/api/http/error_mapping.py (OutpassErrorCode -> factories)
  - api/exception_handlers.py, crosscutting/middleware.py
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    NOT_APPROVED = "NOT_APPROVED"
    MALFORMED_TOKEN = "MALFORMED_TOKEN"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"


_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.MALFORMED_TOKEN: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_STATE: 409,
    ErrorCode.NOT_APPROVED: 409,
    ErrorCode.PAYLOAD_TOO_LARGE: 413,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.DATABASE_ERROR: 503,
}

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


def status_for(code: ErrorCode) -> int:
    return _STATUS_BY_CODE[code]


class ErrorDetail(BaseModel):
    """
    Problem Details + extensiones:
      - code: ErrorCode estable
      - errors: detalles opcionales (loc/msg de validación, request_id, error_id)
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


def problem_body(
    code: ErrorCode,
    detail: str,
    *,
    instance: str | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Cuerpo JSON listo para serializar (sin campos None)."""
    return ErrorDetail(
        type=f"about:blank/{code.value.lower()}",
        title=code.value.replace("_", " ").title(),
        status=status_for(code),
        detail=detail,
        code=code,
        instance=instance,
        errors=errors or None,
    ).model_dump(mode="json", exclude_none=True)


# OpenAPI: mismas respuestas de error para todo /v1.
OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {
        "description": " / ".join(
            c.value for c, s in _STATUS_BY_CODE.items() if s == status
        ),
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }
    for status in sorted(set(_STATUS_BY_CODE.values()))
    if status < 500
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode; el status sale de _STATUS_BY_CODE."""

    def __init__(
        self,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_for(code), detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(ErrorCode.VALIDATION_ERROR, detail, errors)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException(
        ErrorCode.NOT_FOUND, f"{resource} '{identifier}' no encontrado"
    )


def invalid_state(detail: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.INVALID_STATE, detail)


def not_approved(detail: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.NOT_APPROVED, detail)


def malformed_token(detail: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.MALFORMED_TOKEN, detail)


def unauthorized(detail: str = "Se requiere autenticación") -> AppHTTPException:
    return AppHTTPException(ErrorCode.UNAUTHORIZED, detail)


def forbidden(detail: str = "Operación no permitida para este rol") -> AppHTTPException:
    return AppHTTPException(ErrorCode.FORBIDDEN, detail)


def internal_error(detail: str = "Error interno inesperado") -> AppHTTPException:
    return AppHTTPException(ErrorCode.INTERNAL_ERROR, detail)


def service_unavailable(component: str) -> AppHTTPException:
    return AppHTTPException(
        ErrorCode.SERVICE_UNAVAILABLE, f"{component} no disponible por el momento"
    )


# ---------------------------------------------------------------------------
# Respuesta
# ---------------------------------------------------------------------------
def problem_response(request: Request, exc: AppHTTPException) -> JSONResponse:
    """problem+json; agrega request_id a errors[] si el middleware lo fijó."""
    errors = list(exc.errors or [])
    request_id = getattr(request.state, "request_id", None)
    if request_id and all("request_id" not in e for e in errors):
        errors.append({"request_id": request_id})

    return JSONResponse(
        status_code=exc.status_code,
        content=problem_body(
            exc.code, str(exc.detail), instance=str(request.url), errors=errors
        ),
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    return problem_response(request, exc)
