"""Terminal management view state for the retailer portal."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from airvoucher.models import TerminalStatus
from airvoucher.portal.client import PortalAPIError, PortalClient

logger = logging.getLogger(__name__)

DELETE_BLOCKED_HINT = "Cannot delete terminal with sales history"


@dataclass(slots=True, frozen=True)
class TerminalView:
    id: str
    name: str
    status: TerminalStatus
    last_active: str | None = None
    has_sales: bool = False
    contact_name: str | None = None
    contact_email: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TerminalView:
        contact = payload.get("user_profile") or {}
        return cls(
            id=payload["id"],
            name=payload["name"],
            status=TerminalStatus(payload["status"]),
            last_active=payload.get("last_active"),
            has_sales=bool(payload.get("has_sales", False)),
            contact_name=contact.get("full_name"),
            contact_email=contact.get("email"),
        )

    @property
    def is_active(self) -> bool:
        return self.status is TerminalStatus.ACTIVE

    @property
    def can_delete(self) -> bool:
        return not self.has_sales

    @property
    def delete_hint(self) -> str | None:
        return DELETE_BLOCKED_HINT if self.has_sales else None


class TerminalBoard:
    """Lists a retailer's terminals and drives the lifecycle actions.

    Local state only changes after the server confirms an action. Failures
    are kept in :attr:`last_error` for display instead of being raised.
    """

    def __init__(self, client: PortalClient, retailer_id: str | None = None) -> None:
        self._client = client
        self.retailer_id = retailer_id
        self.terminals: list[TerminalView] = []
        self.search_term = ""
        self.last_error: str | None = None
        self.loaded = False

    def load(self) -> list[TerminalView]:
        """Fetch the retailer and its terminals. A failure keeps the current list."""
        try:
            if self.retailer_id is None:
                self.retailer_id = self._client.fetch_my_retailer()["id"]
            payload = self._client.fetch_terminals()
        except PortalAPIError as exc:
            logger.warning("loading terminals failed: %s", exc.message)
            self.last_error = f"Failed to load terminals: {exc.message}"
            return self.terminals
        self.terminals = [TerminalView.from_payload(item) for item in payload]
        self.loaded = True
        self.last_error = None
        return self.terminals

    def search(self, term: str) -> list[TerminalView]:
        self.search_term = term
        return self.visible

    @property
    def visible(self) -> list[TerminalView]:
        needle = self.search_term.strip().lower()
        if not needle:
            return list(self.terminals)
        return [terminal for terminal in self.terminals if needle in terminal.name.lower()]

    @property
    def empty_message(self) -> str | None:
        if self.visible:
            return None
        if self.search_term.strip():
            return "No terminals match your search"
        return "No terminals yet. Add your first terminal to start selling."

    def _find(self, terminal_id: str) -> TerminalView | None:
        return next((terminal for terminal in self.terminals if terminal.id == terminal_id), None)

    def _replace(self, updated: TerminalView) -> None:
        self.terminals = [updated if terminal.id == updated.id else terminal for terminal in self.terminals]

    def toggle(self, terminal_id: str) -> bool:
        terminal = self._find(terminal_id)
        if terminal is None:
            self.last_error = "Failed to update terminal: Terminal not found"
            return False
        target = TerminalStatus.INACTIVE if terminal.is_active else TerminalStatus.ACTIVE
        try:
            result = self._client.toggle_terminal_status(terminal.id, target)
        except PortalAPIError as exc:
            logger.info("toggle of terminal %s rejected: %s", terminal.id, exc.message)
            self.last_error = f"Failed to update terminal: {exc.message}"
            return False
        self._replace(replace(terminal, status=TerminalStatus(result["status"])))
        self.last_error = None
        return True

    def delete(self, terminal_id: str) -> bool:
        terminal = self._find(terminal_id)
        if terminal is None:
            self.last_error = "Failed to delete terminal: Terminal not found"
            return False
        if not terminal.can_delete:
            self.last_error = f"Failed to delete terminal: {DELETE_BLOCKED_HINT}"
            return False
        try:
            self._client.delete_terminal(terminal.id)
        except PortalAPIError as exc:
            logger.info("delete of terminal %s rejected: %s", terminal.id, exc.message)
            self.last_error = f"Failed to delete terminal: {exc.message}"
            return False
        self.terminals = [item for item in self.terminals if item.id != terminal.id]
        self.last_error = None
        return True

    def add(self, name: str) -> TerminalView | None:
        if self.retailer_id is None:
            self.last_error = "Failed to create terminal: Retailer not loaded"
            return None
        try:
            created = self._client.create_terminal(self.retailer_id, name)
        except PortalAPIError as exc:
            logger.info("terminal creation rejected: %s", exc.message)
            self.last_error = f"Failed to create terminal: {exc.message}"
            return None
        self.last_error = None
        self.load()
        refreshed = self._find(created["id"])
        if refreshed is None:
            # Created on the server but the refetch failed; show it anyway.
            refreshed = TerminalView.from_payload(created)
            self.terminals = [*self.terminals, refreshed]
        return refreshed


__all__ = ["DELETE_BLOCKED_HINT", "TerminalBoard", "TerminalView"]
