"""
===============================================================================
TARJETA CRC — application/checkpoint_codec.py
===============================================================================

Módulo:
    Codec del token de checkpoint (contenido del QR / texto manual)

Responsabilidades:
    - encode_token: proyectar un pase aprobado a un string compacto y estable.
    - decode_token: reconstruir CheckpointToken desde str/bytes/Mapping,
      rechazando cualquier payload mal formado con MalformedTokenError.

Colaboradores:
    - domain.entities: CheckpointToken, OutpassRequest
    - pydantic: validación estricta de campos (UUID, datetime, extra=forbid)
    - usecases/checkpoint/verify_checkpoint_scan.py (consume decode_token)
    - usecases/outpass/issue_checkpoint_token.py (consume encode_token)

Formato (v1):
    {"destination": "...", "request_id": "<uuid>", "requester_id": "<uuid>",
     "v": 1, "window_end": "<iso8601 utc>", "window_start": "<iso8601 utc>"}

    - JSON compacto con claves ordenadas: mismo token => mismo string.
    - "v" ausente se interpreta como 1; cualquier otra versión se rechaza.
    - "v" es un entero JSON y las ventanas texto ISO-8601 (sin epochs).

Reglas:
    - Puro: no toca repositorios ni reloj.
    - El token NO es prueba de aprobación: el verificador siempre consulta
      el estado actual del pase.
===============================================================================
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..domain.entities import CheckpointToken, OutpassRequest, ensure_utc

TOKEN_VERSION = 1

TokenPayload = Union[str, bytes, bytearray, Mapping[str, Any]]


class MalformedTokenError(ValueError):
    """El payload escaneado/tipeado no es un token de checkpoint válido."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class _TokenModel(BaseModel):
    """Esquema del token serializado."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    v: int = TOKEN_VERSION
    request_id: UUID
    requester_id: UUID
    destination: str
    window_start: datetime
    window_end: datetime

    @field_validator("v", mode="before")
    @classmethod
    def version_is_integer(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("v must be an integer")
        return value

    @field_validator("window_start", "window_end", mode="before")
    @classmethod
    def window_is_iso_text(cls, value: Any) -> Any:
        # Solo el formato que escribe encode_token; nada de epochs.
        if not isinstance(value, str):
            raise ValueError("window bounds must be ISO-8601 strings")
        return value

    @field_validator("destination")
    @classmethod
    def destination_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("destination must not be empty")
        return value

    @field_validator("window_start", "window_end")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


def _isoformat(value: datetime) -> str:
    return ensure_utc(value).isoformat()


def encode_token(source: CheckpointToken | OutpassRequest) -> str:
    """Serializa un token (o el pase del que se proyecta) en su forma v1."""
    token = (
        CheckpointToken.from_request(source)
        if isinstance(source, OutpassRequest)
        else source
    )
    data = {
        "v": TOKEN_VERSION,
        "request_id": str(token.request_id),
        "requester_id": str(token.requester_id),
        "destination": token.destination,
        "window_start": _isoformat(token.window_start),
        "window_end": _isoformat(token.window_end),
    }
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _load(payload: TokenPayload) -> Any:
    if isinstance(payload, Mapping):
        return dict(payload)

    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedTokenError("Token is not valid UTF-8.") from exc

    if not isinstance(payload, str):
        raise MalformedTokenError("Unsupported token payload type.")

    text = payload.strip()
    if not text:
        raise MalformedTokenError("Token is empty.")

    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise MalformedTokenError("Token is not valid JSON.") from exc


def decode_token(payload: TokenPayload) -> CheckpointToken:
    """
    Reconstruye un CheckpointToken.

    Raises:
        MalformedTokenError: payload no-JSON, no-objeto, campos faltantes o
        inválidos, versión no soportada, ventana vacía/invertida.
    """
    data = _load(payload)
    if not isinstance(data, dict):
        raise MalformedTokenError("Token must be a JSON object.")

    try:
        model = _TokenModel.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        detail = ", ".join(fields) if fields else "payload"
        raise MalformedTokenError(f"Invalid token fields: {detail}.") from exc

    if model.v != TOKEN_VERSION:
        raise MalformedTokenError(f"Unsupported token version: {model.v}.")

    if model.window_start >= model.window_end:
        raise MalformedTokenError("Token window is empty or inverted.")

    return CheckpointToken(
        request_id=model.request_id,
        requester_id=model.requester_id,
        destination=model.destination,
        window_start=model.window_start,
        window_end=model.window_end,
    )
