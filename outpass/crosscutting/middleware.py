# outpass/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middlewares HTTP (correlación + tope de body)
===============================================================================

RequestContextMiddleware
  Cada request lleva un id de correlación. Se toma de X-Request-Id cuando el
  cliente lo manda con un largo razonable; si no, se genera. Ese id queda en
  request.state, en las contextvars (logs) y vuelve en el header de respuesta.

BodyLimitMiddleware
  Los formularios de outpass y los payloads del checkpoint son chicos. Todo
  body por encima de max_body_bytes se corta con 413 antes de llegar a FastAPI,
  tanto si viene con Content-Length como si llega en chunks.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Colaboradores:
  - outpass/context.py (set_request_context / clear_context)
  - crosscutting/error_responses.py (problem_body)
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..context import clear_context, set_request_context
from .error_responses import PROBLEM_JSON_MEDIA_TYPE, ErrorCode, problem_body
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LEN = 128

# Sondas del orquestador: no ensucian el log.
_UNLOGGED_PATHS = frozenset({"/healthz"})


def resolve_request_id(raw: str | None) -> str:
    """Id entrante si es usable; uno nuevo si falta o es demasiado largo."""
    candidate = (raw or "").strip()
    if 0 < len(candidate) <= _MAX_REQUEST_ID_LEN:
        return candidate
    return uuid.uuid4().hex


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Propaga el id de correlación y loguea el cierre de cada request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request abortado", extra={"latency_ms": _elapsed_ms(started)})
            clear_context()
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path not in _UNLOGGED_PATHS:
            logger.info(
                "Request atendido",
                extra={
                    "status_code": response.status_code,
                    "latency_ms": _elapsed_ms(started),
                },
            )
        clear_context()
        return response


class _BodyLimitExceeded(Exception):
    """Señal interna: el body en streaming pasó el tope."""


def _declared_length(scope) -> int | None:
    for name, value in scope.get("headers", []):
        if name.lower() == b"content-length":
            text = value.decode("latin-1").strip()
            return int(text) if text.isdigit() else None
    return None


class BodyLimitMiddleware:
    """ASGI puro: corta con 413 todo body mayor a max_bytes."""

    def __init__(self, app, max_bytes: int | None = None):
        if max_bytes is None:
            from .config import get_settings

            max_bytes = get_settings().max_body_bytes
        self.app = app
        self._max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        path = scope.get("path", "")
        declared = _declared_length(scope)
        if declared is not None and declared > self._max_bytes:
            logger.warning(
                "Body rechazado por Content-Length",
                extra={"declared_bytes": declared, "path": path},
            )
            return await self._reject(scope, receive, send)

        seen = 0
        response_started = False

        async def counting_receive():
            nonlocal seen
            message = await receive()
            if message["type"] == "http.request":
                seen += len(message.get("body") or b"")
                if seen > self._max_bytes:
                    raise _BodyLimitExceeded
            return message

        async def tracking_send(message):
            nonlocal response_started
            response_started = response_started or message["type"] == "http.response.start"
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _BodyLimitExceeded:
            # Con la respuesta ya empezada no hay forma de mandar un 413.
            if response_started:
                raise
            logger.warning(
                "Body rechazado en streaming",
                extra={"received_bytes": seen, "path": path},
            )
            await self._reject(scope, receive, send)

    async def _reject(self, scope, receive, send) -> None:
        body = problem_body(
            ErrorCode.PAYLOAD_TOO_LARGE,
            f"El body supera el máximo de {self._max_bytes} bytes.",
            instance=scope.get("path", ""),
        )
        response = JSONResponse(
            body, status_code=413, media_type=PROBLEM_JSON_MEDIA_TYPE
        )
        await response(scope, receive, send)
