# mypy: ignore-errors
# tests/v1/test_logs.py
"""Tests for the client error reporting endpoint."""

import pytest
from fastapi import status
from sqlalchemy import select

from pulse_stage.models import ErrorLog
from pulse_stage.services.error_log import record_error


def test_anonymous_client_error_is_stored(client, db_session) -> None:
    """Test that reports from anonymous clients are stored as frontend errors."""
    response = client.post(
        "/api/v1/logs/error",
        json={"apiName": "FeedScreen", "errorDetail": {"message": "render failed"}},
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"status": "logged"}

    entry = db_session.scalars(select(ErrorLog)).one()
    assert entry.service == "frontend"
    assert entry.api_name == "FeedScreen"
    assert entry.error_detail == {"message": "render failed"}
    assert entry.user_id is None


def test_client_error_records_caller(client, db_session, bob, bob_headers) -> None:
    """Test that authenticated reports carry the caller id and a default api name."""
    response = client.post(
        "/api/v1/logs/error",
        json={"errorDetail": "plain text"},
        headers=bob_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED

    entry = db_session.scalars(select(ErrorLog)).one()
    assert entry.user_id == str(bob.id)
    assert entry.api_name == "/api/v1/logs/error"
    assert entry.error_detail == {"detail": "plain text"}


@pytest.mark.parametrize(
    "payload",
    [{"apiName": "x"}, {"apiName": "x", "errorDetail": None}],
    ids=["missing", "null"],
)
def test_error_report_requires_detail(client, db_session, payload) -> None:
    """Test that a report without a payload is rejected and nothing is stored."""
    response = client.post("/api/v1/logs/error", json=payload)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "errorDetail is required"
    assert db_session.scalars(select(ErrorLog)).all() == []


def test_record_error_rejects_unknown_service(db_session) -> None:
    """Test that a failed write is swallowed and reported as None."""
    assert record_error(db_session, service="mobile", detail={"x": 1}) is None
    assert db_session.scalars(select(ErrorLog)).all() == []
