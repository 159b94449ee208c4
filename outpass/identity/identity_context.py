"""
===============================================================================
TARJETA CRC — identity/identity_context.py
===============================================================================

Módulo:
    IdentityContext: quién llama (residente, supervisor u operador).

Responsabilidades:
    - Contrato IdentityContext.current_identity() -> Identity | None.
    - Verificar el access token (HS256) y traducir sus claims a Identity.
    - Firmar tokens para entornos de desarrollo y tests; el login real vive
      en el servicio de autenticación.
    - Dependencia FastAPI require_identity(*roles).

Colaboradores:
    - crosscutting.config (secreto, TTL, nombre de cookie)
    - crosscutting.error_responses (401 / 403)
    - context.set_actor_context (actor en cada línea de log)

Reglas:
    - Claims obligatorios: sub (UUID), role (UserRole), exp.
    - typ es opcional; si viene debe ser "access".
    - Los claims se aceptan como vienen: no hay tabla de usuarios acá.
    - Nunca se loguea el token.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Protocol
from uuid import UUID

import jwt
from fastapi import Header, Request

from ..context import set_actor_context
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from .users import Identity, UserRole

_ALGORITHM = "HS256"
_ACCESS = "access"
_REQUIRED_CLAIMS = ["sub", "role", "exp"]


@dataclass(frozen=True, slots=True)
class AuthSettings:
    jwt_secret: str
    jwt_access_ttl_minutes: int
    jwt_cookie_name: str = "access_token"

    @classmethod
    def current(cls) -> "AuthSettings":
        settings = get_settings()
        return cls(
            jwt_secret=settings.jwt_secret,
            jwt_access_ttl_minutes=settings.jwt_access_ttl_minutes,
            jwt_cookie_name=settings.jwt_cookie_name.strip() or "access_token",
        )


class IdentityContext(Protocol):
    def current_identity(self) -> Identity | None: ...


class StaticIdentityContext:
    """Identidad fija; útil en tests y scripts."""

    def __init__(self, identity: Identity | None) -> None:
        self._identity = identity

    def current_identity(self) -> Identity | None:
        return self._identity


class JwtIdentityContext:
    """
    Identidad respaldada por un access token.

    Sin token no hay identidad. Un token presente pero inválido es 401, no
    "anónimo": el cliente creyó estar autenticado.
    """

    def __init__(self, token: str | None, settings: AuthSettings | None = None):
        self._token = (token or "").strip()
        self._settings = settings
        self._identity: Identity | None = None

    def current_identity(self) -> Identity | None:
        if not self._token:
            return None
        if self._identity is None:
            self._identity = decode_access_token(self._token, self._settings)
        return self._identity


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def create_access_token(
    identity: Identity, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Firma un access token para `identity`. Devuelve (token, segundos de vida)."""
    settings = settings or AuthSettings.current()
    lifetime = timedelta(minutes=settings.jwt_access_ttl_minutes)
    issued_at = datetime.now(timezone.utc)

    claims = {
        "sub": str(identity.id),
        "role": identity.role.value,
        "typ": _ACCESS,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    token = jwt.encode(claims, settings.jwt_secret, algorithm=_ALGORITHM)
    return token, int(lifetime.total_seconds())


def _identity_from_claims(claims: Mapping[str, Any]) -> Identity:
    if claims.get("typ", _ACCESS) != _ACCESS:
        raise unauthorized("El token no es de acceso.")
    try:
        return Identity(id=UUID(str(claims["sub"])), role=UserRole(str(claims["role"])))
    except ValueError as exc:
        logger.warning("Access token con sub/role ilegibles")
        raise unauthorized("Token con claims inválidos.") from exc


def decode_access_token(token: str, settings: AuthSettings | None = None) -> Identity:
    """Verifica firma y vencimiento; cualquier falla es 401."""
    settings = settings or AuthSettings.current()
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[_ALGORITHM],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("La sesión expiró.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Token no válido.") from exc
    return _identity_from_claims(claims)


# ---------------------------------------------------------------------------
# Request -> token
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    scheme, _, credentials = (authorization or "").strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credentials.strip() or None


def _request_token(request: Request, authorization: str | None) -> str | None:
    # El header manda; la cookie cubre al panel web del supervisor.
    return _extract_bearer_token(authorization) or request.cookies.get(
        AuthSettings.current().jwt_cookie_name
    )


def require_identity(*roles: UserRole | str) -> Callable:
    """Dependencia: exige identidad y, si se pasan roles, uno de ellos."""
    allowed = frozenset(UserRole(role) for role in roles)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> Identity:
        context = JwtIdentityContext(_request_token(request, authorization))
        identity = context.current_identity()
        if identity is None:
            raise unauthorized("Falta el access token.")
        if allowed and identity.role not in allowed:
            raise forbidden(f"El rol {identity.role.value} no puede usar esta operación.")

        request.state.identity = identity
        set_actor_context(actor_id=str(identity.id), actor_role=identity.role.value)
        return identity

    return dependency
