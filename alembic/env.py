"""
============================================================
TARJETA CRC — alembic/env.py
============================================================
Responsabilidades:
  - Correr las migraciones del esquema outpass (online / offline).
  - Tomar la URL desde Settings (misma fuente que el pool de la app),
    con -x db_url=... como override puntual.

Colaboradores:
  - outpass.crosscutting.config.get_settings
  - SQLAlchemy (solo como engine de Alembic; la app usa psycopg directo)

Notas:
  - Migraciones escritas a mano: target_metadata = None, sin autogenerate.
============================================================
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from outpass.crosscutting.config import get_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = None

_PSYCOPG_SCHEMES = ("postgresql://", "postgres://")


def resolve_url() -> str:
    """URL para SQLAlchemy con driver psycopg 3."""
    url = context.get_x_argument(as_dictionary=True).get("db_url")
    url = url or get_settings().database_url
    for scheme in _PSYCOPG_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+psycopg://" + url[len(scheme) :]
    return url


def run_migrations_offline() -> None:
    """Emite el SQL sin conectarse (alembic upgrade head --sql)."""
    context.configure(
        url=resolve_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(resolve_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, target_metadata=target_metadata)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
