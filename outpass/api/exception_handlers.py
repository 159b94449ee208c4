"""
===============================================================================
TARJETA CRC — outpass/api/exception_handlers.py
===============================================================================

Responsabilidades:
  - Convertir toda excepción que llegue a la app en problem+json.
  - Loguear fallas de servicio con su error_id (el cliente solo ve el id).

Mapeo:
  - AppHTTPException       -> status de su ErrorCode
  - RequestValidationError -> 422 VALIDATION_ERROR con errors[{loc, msg}]
  - OutpassServiceError    -> su error_code (DatabaseError => 503)
  - Exception              -> 500 INTERNAL_ERROR (detalle oculto en producción)

Colaboradores:
  - crosscutting.error_responses, crosscutting.exceptions
===============================================================================
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    problem_response,
    validation_error,
)
from ..crosscutting.exceptions import OutpassServiceError
from ..crosscutting.logger import logger

_SERVICE_DETAIL = {
    ErrorCode.DATABASE_ERROR: "Base de datos no disponible por el momento.",
    ErrorCode.INTERNAL_ERROR: "Error interno.",
}


async def service_error_handler(
    request: Request, exc: OutpassServiceError
) -> JSONResponse:
    try:
        code = ErrorCode(exc.error_code)
    except ValueError:
        code = ErrorCode.INTERNAL_ERROR

    logger.error(
        "Falla de servicio",
        extra={"code": code.value, "error_id": exc.error_id, "error": exc.message},
    )
    return problem_response(
        request,
        AppHTTPException(
            code, _SERVICE_DETAIL[code], errors=[{"error_id": exc.error_id}]
        ),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "loc": ".".join(str(part) for part in err.get("loc", ())),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return problem_response(request, validation_error("Request inválido.", errors))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Excepción no controlada", exc_info=exc)

    detail = "Error interno." if get_settings().is_production() else str(exc)
    return problem_response(request, AppHTTPException(ErrorCode.INTERNAL_ERROR, detail))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OutpassServiceError, service_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
