"""Audit logging middleware and utilities."""
from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from airvoucher.core.config import Settings

_SENSITIVE_KEYS = {
    "email",
    "password",
    "refresh_token",
    "access_token",
    "phone",
    "phone_number",
}


def _mask_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _mask_value(value[key]) for key in value}
    if isinstance(value, list):
        return [_mask_value(item) for item in value]
    if isinstance(value, str):
        if "@" in value:
            name, _, domain = value.partition("@")
            hidden = name[0] + "***" if name else "***"
            return f"{hidden}@{domain}" if domain else "***@***"
        if value.isdigit() and len(value) > 4:
            return f"***{value[-4:]}"
    return value


def _mask_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    sanitized: dict[str, Any] = {}
    for key, value in mapping.items():
        if key.lower() in _SENSITIVE_KEYS:
            if isinstance(value, str) and len(value) > 4:
                sanitized[key] = f"***{value[-4:]}"
            else:
                sanitized[key] = "***"
        else:
            sanitized[key] = _mask_value(value)
    return sanitized


@dataclass(slots=True)
class AuditLogRecord:
    """Structured log entry emitted by the middleware."""

    timestamp: str
    request_id: str
    method: str
    path: str
    status: int
    duration_ms: float
    actor: str | None
    role: str | None
    ip_address: str | None
    query: dict[str, Any]
    body: Any

    def to_json(self) -> str:
        payload = {
            "timestamp": self.timestamp,
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "status": self.status,
            "duration_ms": round(self.duration_ms, 2),
            "actor": self.actor,
            "role": self.role,
            "ip_address": self.ip_address,
            "query": self.query,
            "body": self.body,
        }
        return json.dumps(payload, default=str)

    def to_dict(self) -> dict[str, Any]:
        return json.loads(self.to_json())


class AuditMiddleware(BaseHTTPMiddleware):
    """Starlette middleware writing one masked audit line per request."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        settings: Settings,
        logger: logging.Logger | None = None,
        sampler: Callable[[], float] | None = None,
    ) -> None:
        super().__init__(app)
        self._settings = settings
        self._logger = logger or logging.getLogger("audit")
        self._sampler = sampler or random.random

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        body_bytes = await request.body()
        self._set_body(request, body_bytes)

        masked_body = None
        if body_bytes:
            try:
                parsed = json.loads(body_bytes)
                masked_body = _mask_value(parsed)
                if isinstance(parsed, dict):
                    masked_body = _mask_mapping(masked_body)
            except json.JSONDecodeError:
                masked_body = "<binary>"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        actor = getattr(request.state, "actor_id", None)
        role = getattr(request.state, "actor_role", None)
        ip_address = request.client.host if request.client else None
        query_dict = _mask_mapping(dict(request.query_params.multi_items()))

        record = AuditLogRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
            actor=actor,
            role=role,
            ip_address=ip_address,
            query=query_dict,
            body=masked_body,
        )

        if self._should_sample():
            self._logger.info(record.to_json())

        response.headers["X-Request-ID"] = request_id
        return response

    def _should_sample(self) -> bool:
        rate = self._settings.audit_log_sample_rate
        if rate <= 0:
            return False
        return rate >= 1 or self._sampler() <= rate

    @staticmethod
    def _set_body(request: Request, body: bytes) -> None:
        async def receive() -> dict[str, Any]:
            nonlocal consumed
            if consumed:
                return {"type": "http.request", "body": b"", "more_body": False}
            consumed = True
            return {"type": "http.request", "body": body, "more_body": False}

        consumed = False
        request._receive = receive  # type: ignore[attr-defined]


__all__ = ["AuditLogRecord", "AuditMiddleware"]
