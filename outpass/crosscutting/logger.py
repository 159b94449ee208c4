# outpass/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger "outpass" (una línea JSON por evento)
===============================================================================

Cada línea lleva el request_id y el actor del request en curso, así un
movimiento registrado en el checkpoint se puede seguir hasta el operador que
lo escaneó.

Lo que nunca sale en un log:
  - access tokens y headers Authorization
  - el payload crudo de un QR o de la entrada manual (identifica un pase)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + logger

Colaboradores:
  - outpass/context.py (get_context_dict)
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Todo lo que LogRecord trae de fábrica; el resto vino por extra={...}.
_STANDARD_FIELDS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_SECRET_FIELDS = {
    "access_token",
    "authorization",
    "jwt",
    "jwt_secret",
    "password",
    "payload",
    "secret",
    "token",
}

_MAX_TEXT = 4_000
_MAX_DEPTH = 4


def _loggable(value: Any, depth: int = 0) -> Any:
    """Convierte `value` en algo que json.dumps acepta, ocultando secretos."""
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value[:_MAX_TEXT] + "…" if len(value) > _MAX_TEXT else value
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes {len(value)}B>"
    if depth >= _MAX_DEPTH:
        return "<anidado>"
    if isinstance(value, dict):
        return {
            str(k): "<oculto>" if str(k).lower() in _SECRET_FIELDS else _loggable(v, depth + 1)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_loggable(item, depth + 1) for item in value]
    return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON con contexto del request y campos extra."""

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_FIELDS
        }
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
            **get_context_dict(),
            **_loggable(extras),
        }
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, separators=(",", ":"))


def _build_logger() -> logging.Logger:
    from .config import get_settings

    settings = get_settings()
    log = logging.getLogger("outpass")
    log.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # Reimportar el módulo no debe duplicar la salida.
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if settings.log_json
            else logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        )
        log.addHandler(handler)
    return log


logger = _build_logger()
