"""
Name: Outpass API (ASGI entry point)

Responsibilities:
  - Build the FastAPI app: middleware stack, /v1 router, problem+json handlers
  - Own the process lifecycle: production checks, PostgreSQL pool open/close
  - Serve /healthz for the orchestrator

Collaborators:
  - crosscutting.middleware: X-Request-Id correlation, body size limit
  - interfaces.api.http.router: outpass and checkpoint endpoints
  - infrastructure.db.pool: shared psycopg pool

Notes:
  - Run with: uvicorn outpass.api.main:app
  - APP_ENV=test never opens a pool (in-memory repositories)
  - Login is not served here; callers present a JWT issued upstream
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..crosscutting.config import Settings, get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import (
    REQUEST_ID_HEADER,
    BodyLimitMiddleware,
    RequestContextMiddleware,
)
from ..infrastructure.db.pool import close_pool, get_pool, init_pool
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers

API_VERSION = "0.1.0"

TAGS = [
    {"name": "outpasses", "description": "Solicitudes de salida y decisiones del supervisor"},
    {"name": "checkpoint", "description": "Tokens QR, escaneos y bitácora de movimientos"},
]


def _uses_database(settings: Settings) -> bool:
    return not settings.is_test()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.is_production():
        settings.validate_security_requirements()

    with_db = _uses_database(settings)
    if with_db:
        init_pool(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
    logger.info("Outpass API lista", extra={"app_env": settings.app_env, "db": with_db})
    try:
        yield
    finally:
        if with_db:
            close_pool()
        logger.info("Outpass API detenida")


def _database_health() -> str:
    if not _uses_database(get_settings()):
        return "disabled"
    try:
        with get_pool().connection() as conn:
            conn.execute("SELECT 1")
    except Exception as exc:
        logger.warning("healthz: base de datos inaccesible", extra={"error": str(exc)})
        return "disconnected"
    return "connected"


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Outpass API", version=API_VERSION, lifespan=lifespan, openapi_tags=TAGS
    )

    # add_middleware apila hacia afuera: el último agregado corre primero.
    app.add_middleware(BodyLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)
    app.include_router(router, prefix="/v1")

    @app.get("/healthz", tags=["health"])
    def healthz(request: Request) -> dict:
        db = _database_health()
        return {
            "ok": db != "disconnected",
            "db": db,
            "request_id": getattr(request.state, "request_id", None),
        }

    return app


app = create_app()
