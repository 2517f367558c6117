# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for authentication endpoints."""

from __future__ import annotations

from fastapi import status
from sqlalchemy import select

from pulse_stage.models import User


def _register(client, email="dana@example.com", password="Str0ng!pass"):
    return client.post("/api/v1/auth/register", json={"email": email, "password": password})


def test_register_returns_token(client) -> None:
    """Test registering a new account."""
    response = _register(client)
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["user"]["email"] == "dana@example.com"
    assert body["user"]["role"] == "user"
    assert body["token_type"] == "bearer"

    me = client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {body['access_token']}"},
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == body["user"]["id"]


def test_register_normalizes_email(client) -> None:
    """Test that emails are stored lower-case."""
    response = _register(client, email="Dana@Example.COM")
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user"]["email"] == "dana@example.com"


def test_register_duplicate_active_email(client, alice) -> None:
    """Test that an active account's email cannot be reused."""
    response = _register(client, email="alice@example.com")
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Email is already in use by an active account"


def test_register_reactivates_deleted_account(client, make_user) -> None:
    """Test that registering over a deactivated account revives it."""
    old = make_user("old@example.com", is_deleted=True)
    response = _register(client, email="old@example.com", password="N3w!passw")
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user"]["id"] == str(old.id)

    login = client.post(
        "/api/v1/auth/login", json={"email": "old@example.com", "password": "N3w!passw"}
    )
    assert login.status_code == status.HTTP_200_OK


def test_register_weak_password(client) -> None:
    """Test that passwords missing a character class are rejected."""
    response = _register(client, password="alllowercase1!")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Password must contain 1 uppercase letter"


def test_register_rejects_password_over_bcrypt_byte_limit(client, db_session) -> None:
    """Test that a short but multibyte password beyond 72 bytes is a 400."""
    password = "Aa1!" + "\U0001F600" * 28
    assert len(password) == 32

    response = _register(client, password=password)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Password must be at most 72 bytes"
    assert db_session.scalars(select(User)).all() == []


def test_register_accepts_multibyte_password_within_limit(client) -> None:
    """Test that multibyte passwords under 72 bytes register and log in."""
    password = "Aa1!" + "é" * 28
    assert _register(client, password=password).status_code == status.HTTP_201_CREATED

    login = client.post(
        "/api/v1/auth/login", json={"email": "dana@example.com", "password": password}
    )
    assert login.status_code == status.HTTP_200_OK


def test_login_with_overlong_password_is_unauthorized(client, alice) -> None:
    """Test that logging in with a password bcrypt cannot hash is a plain 401."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "alice@example.com", "password": "Aa1!" + "\U0001F600" * 28},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_register_invalid_email(client) -> None:
    """Test that malformed emails fail request validation."""
    response = _register(client, email="not-an-email")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_login(client, alice, user_password) -> None:
    """Test logging in with the right password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": user_password}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["id"] == str(alice.id)


def test_login_wrong_password(client, alice) -> None:
    """Test that a wrong password is unauthorized."""
    response = client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "Wr0ng!pass"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid email or password"


def test_login_deleted_account(client, make_user, user_password) -> None:
    """Test that deactivated accounts cannot log in."""
    make_user("gone@example.com", is_deleted=True)
    response = client.post(
        "/api/v1/auth/login", json={"email": "gone@example.com", "password": user_password}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_requires_token(client) -> None:
    """Test that /auth/me rejects anonymous callers."""
    response = client.get("/api/v1/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_rejects_deleted_user(client, make_user, headers_for) -> None:
    """Test that tokens of deactivated users stop working."""
    user = make_user("ghost@example.com", is_deleted=True)
    response = client.get("/api/v1/auth/me", headers=headers_for(user))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "User not found"
