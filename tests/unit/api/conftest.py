"""
Name: API Test Fixtures

Responsibilities:
  - Build an isolated FastAPI app per test (in-memory repositories)
  - Issue bearer headers for each role
  - Reset container singletons between tests
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from outpass.api.main import create_app
from outpass.container import (
    get_audit_repository,
    get_outpass_log_repository,
    get_outpass_request_repository,
)
from outpass.identity.identity_context import create_access_token
from outpass.identity.users import Identity, UserRole


def _clear_repositories() -> None:
    get_outpass_request_repository().clear()
    get_outpass_log_repository().clear()
    get_audit_repository().clear()


@pytest.fixture(autouse=True)
def _reset_repositories():
    _clear_repositories()
    yield
    _clear_repositories()


@pytest.fixture
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


def bearer(identity: Identity) -> dict[str, str]:
    token, _ = create_access_token(identity)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth():
    """Factory: auth(role) -> (identity, headers)."""

    def _auth(role: UserRole):
        identity = Identity(id=uuid4(), role=role)
        return identity, bearer(identity)

    return _auth
