"""
===============================================================================
TARJETA CRC — outpass/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Mantener datos correlacionables del request en ContextVars.
  - Registrar quién actúa (actor_id / actor_role) una vez resuelta la identidad,
    para que cada log de lifecycle/checkpoint quede atribuido.
  - Exponer get_context_dict() para el logger y clear_context() para el middleware.

Colaboradores:
  - crosscutting.middleware.RequestContextMiddleware: request_id/method/path.
  - identity.identity_context: set_actor_context() al resolver la identidad.
  - crosscutting.logger.JSONFormatter: lee get_context_dict().

Restricciones:
  - Solo strings (serialización trivial); "" significa "no disponible".
  - El core NUNCA lee identidad desde acá: la identidad se pasa explícita a
    cada caso de uso. Esto es solo para observabilidad.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")
actor_id_var: ContextVar[str] = ContextVar("actor_id", default="")
actor_role_var: ContextVar[str] = ContextVar("actor_role", default="")

_ALL_VARS: dict[str, ContextVar[str]] = {
    "request_id": request_id_var,
    "method": http_method_var,
    "path": http_path_var,
    "actor_id": actor_id_var,
    "actor_role": actor_role_var,
}


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Setea el contexto mínimo del request."""
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def set_actor_context(*, actor_id: str = "", actor_role: str = "") -> None:
    """Registra el actor resuelto para el request en curso."""
    actor_id_var.set(actor_id or "")
    actor_role_var.set(actor_role or "")


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict, omitiendo claves vacías."""
    return {name: value for name, var in _ALL_VARS.items() if (value := var.get())}


def clear_context() -> None:
    """Limpia el contexto al final del request (evita filtraciones entre requests)."""
    for var in _ALL_VARS.values():
        var.set("")
