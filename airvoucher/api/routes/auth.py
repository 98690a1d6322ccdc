"""Authentication endpoints for issuing JWTs."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Any, Literal
from uuid import uuid4

import bcrypt
from cryptography.hazmat.primitives import serialization
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from airvoucher.api.deps import get_db_session
from airvoucher.core.config import Settings, get_settings
from airvoucher.models import User, UserRole, UserStatus

router = APIRouter()
security_scheme = HTTPBearer(auto_error=False)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class SessionResponse(BaseModel):
    user_id: str
    email: str
    role: UserRole


class TokenPayload(BaseModel):
    sub: str
    email: str
    role: UserRole
    type: Literal["access", "refresh"]
    iat: datetime
    exp: datetime
    jti: str


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
    email: str
    role: UserRole
    token_id: str


class RefreshTokenStore:
    """In-memory store tracking active and blacklisted refresh tokens."""

    def __init__(self) -> None:
        self._active: dict[str, str] = {}
        self._blacklist: set[str] = set()
        self._lock = Lock()

    def mark_active(self, subject: str, token_id: str) -> None:
        with self._lock:
            self._active[subject] = token_id

    def is_active(self, subject: str, token_id: str) -> bool:
        with self._lock:
            if token_id in self._blacklist:
                return False
            return self._active.get(subject) == token_id

    def blacklist(self, token_id: str) -> None:
        with self._lock:
            self._blacklist.add(token_id)

    def reset(self) -> None:
        with self._lock:
            self._active.clear()
            self._blacklist.clear()


refresh_token_store = RefreshTokenStore()


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _create_token(
    *,
    user: User,
    settings: Settings,
    expires_delta: timedelta,
    token_type: Literal["access", "refresh"],
    signing_key: Any,
) -> tuple[str, str]:
    now = datetime.now(UTC)
    token_id = uuid4().hex
    payload = {
        "sub": user.id,
        "email": user.email,
        "role": user.role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "type": token_type,
        "jti": token_id,
    }
    encoded = jwt.encode(payload, signing_key, algorithm=settings.jwt_algorithm)
    return encoded, token_id


def _issue_tokens(*, user: User, settings: Settings) -> tuple[TokenResponse, str]:
    signing_key = _load_signing_key(settings)
    access_token, _ = _create_token(
        user=user,
        settings=settings,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        token_type="access",
        signing_key=signing_key,
    )
    refresh_token, refresh_id = _create_token(
        user=user,
        settings=settings,
        expires_delta=timedelta(days=settings.refresh_token_expire_days),
        token_type="refresh",
        signing_key=signing_key,
    )

    response = TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )
    return response, refresh_id


def _decode_token(*, token: str, settings: Settings) -> TokenPayload:
    try:
        payload = jwt.decode(token, settings.jwt_private_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise _unauthorized("Invalid token") from exc
    try:
        validated = TokenPayload(**payload)
    except ValidationError as exc:  # pragma: no cover - validation handles data issues
        raise _unauthorized("Invalid token") from exc
    return validated


def _load_signing_key(settings: Settings) -> Any:
    if settings.jwt_algorithm.startswith("HS"):
        return settings.jwt_private_key
    try:
        return serialization.load_pem_private_key(
            settings.jwt_private_key.encode("utf-8"),
            password=None,
        )
    except ValueError as exc:  # pragma: no cover - configuration issue
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Invalid JWT signing key",
        ) from exc


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> AuthenticatedUser:
    if credentials is None:
        raise _unauthorized()
    settings = get_settings()
    payload = _decode_token(token=credentials.credentials, settings=settings)
    if payload.type != "access":
        raise _unauthorized("Invalid token type")
    request.state.actor_id = payload.sub
    request.state.actor_role = payload.role.value
    return AuthenticatedUser(
        user_id=payload.sub,
        email=payload.email,
        role=payload.role,
        token_id=payload.jti,
    )


def require_role(*roles: UserRole) -> Callable[..., AuthenticatedUser]:
    allowed_roles: set[UserRole] = set(roles)

    def dependency(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return dependency


@router.post("/login", response_model=TokenResponse, summary="Issue JWT access tokens")
def login(request: LoginRequest, session: Session = Depends(get_db_session)) -> TokenResponse:
    settings = get_settings()
    email = request.email.strip().lower()
    if "@" not in email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email address")

    user = session.scalars(select(User).where(User.email == email)).first()
    if user is None or not _verify_password(request.password, user.hashed_password):
        raise _unauthorized("Invalid credentials")
    if user.status is not UserStatus.ACTIVE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    response, refresh_id = _issue_tokens(user=user, settings=settings)
    refresh_token_store.mark_active(user.id, refresh_id)
    return response


@router.post("/refresh", response_model=TokenResponse, summary="Rotate JWT refresh tokens")
def refresh_token(request: RefreshRequest, session: Session = Depends(get_db_session)) -> TokenResponse:
    settings = get_settings()
    payload = _decode_token(token=request.refresh_token, settings=settings)
    if payload.type != "refresh":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token type")
    if not refresh_token_store.is_active(payload.sub, payload.jti):
        raise _unauthorized("Refresh token revoked")

    user = session.get(User, payload.sub)
    if user is None or user.status is not UserStatus.ACTIVE:
        raise _unauthorized("Unknown user")

    refresh_token_store.blacklist(payload.jti)
    response, refresh_id = _issue_tokens(user=user, settings=settings)
    refresh_token_store.mark_active(user.id, refresh_id)
    return response


@router.get("/session", response_model=SessionResponse, summary="Describe the signed-in user")
def current_session(user: AuthenticatedUser = Depends(get_current_user)) -> SessionResponse:
    return SessionResponse(user_id=user.user_id, email=user.email, role=user.role)


def hash_password(raw_password: str) -> str:
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _verify_password(raw_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:  # pragma: no cover - invalid hash format
        return False


__all__ = [
    "AuthenticatedUser",
    "get_current_user",
    "hash_password",
    "refresh_token_store",
    "require_role",
    "router",
]
