from __future__ import annotations

from jose import jwt
from sqlalchemy.orm import Session

from airvoucher.core.config import get_settings
from airvoucher.models import User, UserStatus

PASSWORD = "changeme"


def _login(client, email: str = "retailer@example.com") -> tuple[str, str]:  # type: ignore[no-untyped-def]
    response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200
    body = response.json()
    return body["access_token"], body["refresh_token"]


def test_login_returns_signed_tokens(client, portal) -> None:
    access_token, refresh_token = _login(client, "Retailer@Example.com")

    settings = get_settings()
    access_payload = jwt.decode(access_token, settings.jwt_private_key, algorithms=[settings.jwt_algorithm])
    refresh_payload = jwt.decode(refresh_token, settings.jwt_private_key, algorithms=[settings.jwt_algorithm])

    assert access_payload["sub"] == "user-retailer"
    assert access_payload["type"] == "access"
    assert access_payload["role"] == "retailer"
    assert refresh_payload["type"] == "refresh"


def test_login_with_wrong_password_is_unauthorized(client, portal) -> None:
    response = client.post("/api/auth/login", json={"email": "retailer@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_disabled_account_cannot_sign_in(client, portal, db_session: Session) -> None:
    user = db_session.get(User, "user-retailer")
    user.status = UserStatus.DISABLED
    db_session.commit()

    response = client.post("/api/auth/login", json={"email": "retailer@example.com", "password": PASSWORD})

    assert response.status_code == 403


def test_refresh_rotates_and_blacklists_tokens(client, portal) -> None:
    _, refresh_token = _login(client)

    first_response = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
    assert first_response.status_code == 200
    new_refresh_token = first_response.json()["refresh_token"]

    second_response = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
    assert second_response.status_code == 401

    third_response = client.post("/api/auth/refresh", json={"refresh_token": new_refresh_token})
    assert third_response.status_code == 200


def test_session_describes_signed_in_user(client, portal) -> None:
    access_token, _ = _login(client)

    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {access_token}"})

    assert response.json() == {
        "user_id": "user-retailer",
        "email": "retailer@example.com",
        "role": "retailer",
    }


def test_refresh_token_is_not_an_access_token(client, portal) -> None:
    _, refresh_token = _login(client)

    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {refresh_token}"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token type"}


def test_garbage_token_is_rejected(client, portal) -> None:
    response = client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token"}
