"""
Name: App Wiring Tests

Responsibilities:
  - Validate /healthz in test mode (DB disabled)
  - Validate X-Request-Id propagation (header + problem+json body)
  - Validate body limit (413 PAYLOAD_TOO_LARGE)
  - Validate OpenAPI generation for the /v1 routes
"""

import pytest

from outpass.identity.users import UserRole

pytestmark = pytest.mark.unit


def test_healthz_reports_disabled_db(client):
    res = client.get("/healthz", headers={"X-Request-Id": "health-1"})

    assert res.status_code == 200
    assert res.json() == {"ok": True, "db": "disabled", "request_id": "health-1"}
    assert res.headers["X-Request-Id"] == "health-1"


def test_request_id_is_generated_when_missing(client):
    res = client.get("/healthz")
    assert res.headers["X-Request-Id"]


def test_oversized_request_id_is_replaced(client):
    res = client.get("/healthz", headers={"X-Request-Id": "x" * 500})
    assert res.headers["X-Request-Id"] != "x" * 500


def test_problem_body_carries_request_id(client, auth):
    _, headers = auth(UserRole.SUPERVISOR)

    res = client.get(
        "/v1/outpasses/00000000-0000-0000-0000-000000000000",
        headers={**headers, "X-Request-Id": "req-404"},
    )

    assert res.status_code == 404
    body = res.json()
    assert body["status"] == 404
    assert {"request_id": "req-404"} in body["errors"]


def test_body_limit_rejects_large_payload(client, auth):
    _, headers = auth(UserRole.RESIDENT)
    oversized = b"{" + b" " * (2 * 1024 * 1024) + b"}"

    res = client.post(
        "/v1/outpasses",
        content=oversized,
        headers={**headers, "Content-Type": "application/json"},
    )

    assert res.status_code == 413
    assert res.json()["code"] == "PAYLOAD_TOO_LARGE"


def test_openapi_lists_v1_routes(client):
    paths = client.get("/openapi.json").json()["paths"]

    assert "/v1/outpasses" in paths
    assert "/v1/outpasses/{outpass_id}/decision" in paths
    assert "/v1/checkpoint/scans" in paths
    assert "/v1/checkpoint/logs" in paths
