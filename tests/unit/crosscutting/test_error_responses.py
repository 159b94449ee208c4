"""
Name: RFC7807 Error Response Tests

Responsibilities:
  - Validate factories (status + code) for every outpass error kind
  - Validate problem+json payload shape
"""

import json

import pytest
from starlette.requests import Request

from outpass.crosscutting.error_responses import (
    PROBLEM_JSON_MEDIA_TYPE,
    ErrorCode,
    forbidden,
    invalid_state,
    malformed_token,
    not_approved,
    not_found,
    problem_response,
    unauthorized,
    validation_error,
)
from outpass.crosscutting.exceptions import DatabaseError

pytestmark = pytest.mark.unit


def _request(path: str = "/v1/outpasses") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [(b"host", b"testserver")],
        "scheme": "http",
        "server": ("testserver", 80),
    }
    return Request(scope)


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (validation_error("x"), 422, ErrorCode.VALIDATION_ERROR),
        (not_found("Outpass", "1"), 404, ErrorCode.NOT_FOUND),
        (invalid_state("x"), 409, ErrorCode.INVALID_STATE),
        (not_approved("x"), 409, ErrorCode.NOT_APPROVED),
        (malformed_token("x"), 400, ErrorCode.MALFORMED_TOKEN),
        (forbidden(), 403, ErrorCode.FORBIDDEN),
        (unauthorized(), 401, ErrorCode.UNAUTHORIZED),
    ],
)
def test_factories(exc, status, code):
    assert exc.status_code == status
    assert exc.code == code


def test_problem_response_shape():
    request = _request()
    request.state.request_id = "req-1"

    response = problem_response(request, not_approved("Outpass request is pending."))
    body = json.loads(response.body)

    assert response.status_code == 409
    assert response.media_type == PROBLEM_JSON_MEDIA_TYPE
    assert body["code"] == "NOT_APPROVED"
    assert body["title"] == "Not Approved"
    assert body["detail"] == "Outpass request is pending."
    assert body["errors"] == [{"request_id": "req-1"}]


def test_service_errors_carry_error_id():
    error = DatabaseError("boom")
    other = DatabaseError("boom")
    assert error.error_id and error.error_id != other.error_id
    assert error.to_dict()["error_code"] == "DATABASE_ERROR"
