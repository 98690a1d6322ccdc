"""HTTP client for the portal JSON API."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from airvoucher.models import TerminalStatus, UserRole
from airvoucher.obs import inject_traceparent
from airvoucher.portal.session import SessionContext, SessionRecord
from airvoucher.services.sales_table import FilterState

logger = logging.getLogger(__name__)


class PortalAPIError(RuntimeError):
    """Raised for any non-2xx API response. ``message`` is the server's error text."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class PortalClient:
    """Thin wrapper over ``httpx.Client`` that keeps the bearer tokens.

    Any ``httpx.Client`` works, including FastAPI's ``TestClient``.
    """

    def __init__(self, http: httpx.Client, *, session_context: SessionContext | None = None) -> None:
        self._http = http
        self._owns_client = False
        self.session_context = session_context or SessionContext()
        self._access_token: str | None = None
        self._refresh_token: str | None = None

    @classmethod
    def from_base_url(cls, base_url: str, *, timeout_seconds: float = 10.0) -> PortalClient:
        client = cls(httpx.Client(base_url=base_url, timeout=timeout_seconds))
        client._owns_client = True
        return client

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return inject_traceparent(headers)

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = self._http.request(method, path, json=json, params=params, headers=self._headers())
        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise PortalAPIError(response.status_code, str(message))
        if not response.content:
            return None
        return response.json()

    def login(self, email: str, password: str) -> SessionRecord:
        tokens = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self._access_token = tokens["access_token"]
        self._refresh_token = tokens["refresh_token"]
        return self.fetch_session()

    def refresh(self) -> SessionRecord:
        if self._refresh_token is None:
            raise PortalAPIError(401, "Not signed in")
        tokens = self._request("POST", "/api/auth/refresh", json={"refresh_token": self._refresh_token})
        self._access_token = tokens["access_token"]
        self._refresh_token = tokens["refresh_token"]
        return self.fetch_session()

    def fetch_session(self) -> SessionRecord:
        body = self._request("GET", "/api/auth/session")
        record = SessionRecord(user_id=body["user_id"], email=body["email"], role=UserRole(body["role"]))
        self.session_context.set(record)
        return record

    def sign_out(self) -> None:
        self._access_token = None
        self._refresh_token = None
        self.session_context.clear()

    def fetch_my_retailer(self) -> dict[str, Any]:
        return self._request("GET", "/api/retailer/me")

    def fetch_terminals(self, search: str | None = None) -> list[dict[str, Any]]:
        params = {"search": search} if search else None
        return self._request("GET", "/api/retailer/terminals", params=params)

    def create_terminal(self, retailer_id: str, name: str) -> dict[str, Any]:
        body = self._request(
            "POST", "/api/retailer/terminals/create", json={"retailerId": retailer_id, "name": name}
        )
        return body["terminal"]

    def toggle_terminal_status(self, terminal_id: str, status: TerminalStatus | str) -> dict[str, Any]:
        body = self._request(
            "POST",
            "/api/retailer/terminals/toggle-status",
            json={"terminalId": terminal_id, "status": TerminalStatus(status).value},
        )
        return body["terminal"]

    def delete_terminal(self, terminal_id: str) -> None:
        self._request("POST", "/api/retailer/terminals/delete", json={"terminalId": terminal_id})

    def fetch_sales(self, state: FilterState) -> dict[str, Any]:
        return self._request("GET", "/api/sales", params=state.query_params())

    def fetch_dashboard(self) -> dict[str, Any]:
        return self._request("GET", "/api/retailer/dashboard")

    def fetch_navigation(self, path: str) -> dict[str, Any]:
        return self._request("GET", "/api/navigation", params={"path": path})


__all__ = ["PortalAPIError", "PortalClient"]
