"""Infra DB: pool PostgreSQL del proceso."""

from .pool import (
    OutpassPool,
    PoolAlreadyInitializedError,
    close_pool,
    get_pool,
    init_pool,
)

__all__ = [
    "OutpassPool",
    "PoolAlreadyInitializedError",
    "close_pool",
    "get_pool",
    "init_pool",
]
