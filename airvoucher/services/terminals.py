"""Terminal lifecycle: create, change status and delete.

Every action re-checks that the acting user owns the retailer behind the
terminal. Nothing is written until all checks pass, and a failed commit is
rolled back so the stored terminal is left as it was.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from airvoucher.models import AuditLog, Retailer, Terminal, TerminalStatus
from airvoucher.obs import record_terminal_action, traced_terminal_action
from airvoucher.services.retailers import terminal_has_sales

logger = logging.getLogger(__name__)


class TerminalError(RuntimeError):
    """Base exception for terminal lifecycle errors."""


class RetailerAccessError(TerminalError):
    """Raised when the user does not own the retailer behind the request."""


class TerminalNotFoundError(TerminalError):
    """Raised when the terminal identifier does not exist."""


class TerminalHasSalesError(TerminalError):
    """Raised when deleting a terminal that has recorded sales."""


class TerminalPersistenceError(TerminalError):
    """Raised when the store rejects a write. The message is safe to show."""


def _owned_retailer(session: Session, *, retailer_id: str, user_id: str) -> Retailer:
    retailer = session.get(Retailer, retailer_id)
    if retailer is None or retailer.user_profile_id != user_id:
        raise RetailerAccessError("Not authorized to manage this retailer")
    return retailer


def _owned_terminal(session: Session, *, terminal_id: str, user_id: str) -> Terminal:
    terminal = session.get(Terminal, terminal_id)
    if terminal is None:
        raise TerminalNotFoundError("Terminal not found")
    retailer = session.get(Retailer, terminal.retailer_id)
    if retailer is None or retailer.user_profile_id != user_id:
        raise RetailerAccessError("Not authorized to manage this terminal")
    return terminal


def _audit(
    session: Session,
    *,
    action: str,
    terminal_id: str,
    actor_id: str,
    payload: dict,
    ip_address: str | None,
) -> None:
    session.add(
        AuditLog(
            actor_id=actor_id,
            action=action,
            resource_type="Terminal",
            resource_id=terminal_id,
            payload=payload,
            ip_address=ip_address,
        )
    )


def _commit(session: Session, *, action: str, failure_message: str) -> None:
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("terminal %s failed to persist", action)
        record_terminal_action(action, "error")
        raise TerminalPersistenceError(failure_message) from exc


@traced_terminal_action("create")
def create_terminal(
    session: Session,
    *,
    retailer_id: str,
    name: str,
    actor_id: str,
    ip_address: str | None = None,
) -> Terminal:
    """Register a new terminal under a retailer the actor owns. Terminals start active."""

    try:
        retailer = _owned_retailer(session, retailer_id=retailer_id, user_id=actor_id)
    except RetailerAccessError:
        record_terminal_action("create", "rejected")
        raise

    terminal = Terminal(retailer_id=retailer.id, name=name.strip(), status=TerminalStatus.ACTIVE)
    session.add(terminal)
    try:
        session.flush()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("terminal create failed to flush")
        record_terminal_action("create", "error")
        raise TerminalPersistenceError("Failed to create terminal") from exc

    _audit(
        session,
        action="terminal.create",
        terminal_id=terminal.id,
        actor_id=actor_id,
        payload={"retailer_id": retailer.id, "name": terminal.name},
        ip_address=ip_address,
    )
    _commit(session, action="create", failure_message="Failed to create terminal")
    session.refresh(terminal)
    record_terminal_action("create", "success")
    logger.info("terminal %s created for retailer %s", terminal.id, retailer.id)
    return terminal


@traced_terminal_action("toggle_status")
def set_terminal_status(
    session: Session,
    *,
    terminal_id: str,
    status: TerminalStatus | str,
    actor_id: str,
    ip_address: str | None = None,
) -> Terminal:
    """Move a terminal to ``active`` or ``inactive``.

    Either transition is allowed from either state, including for terminals
    with sales history.
    """

    new_status = TerminalStatus(status)
    try:
        terminal = _owned_terminal(session, terminal_id=terminal_id, user_id=actor_id)
    except TerminalError:
        record_terminal_action("toggle_status", "rejected")
        raise

    previous = terminal.status
    terminal.status = new_status
    _audit(
        session,
        action="terminal.status",
        terminal_id=terminal.id,
        actor_id=actor_id,
        payload={"from": previous.value, "to": new_status.value},
        ip_address=ip_address,
    )
    _commit(session, action="toggle_status", failure_message="Failed to update terminal status")
    session.refresh(terminal)
    record_terminal_action("toggle_status", "success")
    return terminal


@traced_terminal_action("delete")
def delete_terminal(
    session: Session,
    *,
    terminal_id: str,
    actor_id: str,
    ip_address: str | None = None,
) -> None:
    """Delete a terminal that has never recorded a sale."""

    try:
        terminal = _owned_terminal(session, terminal_id=terminal_id, user_id=actor_id)
        if terminal_has_sales(session, terminal_id=terminal.id):
            raise TerminalHasSalesError("Cannot delete terminal with sales history")
    except TerminalError:
        record_terminal_action("delete", "rejected")
        raise

    _audit(
        session,
        action="terminal.delete",
        terminal_id=terminal.id,
        actor_id=actor_id,
        payload={"retailer_id": terminal.retailer_id, "name": terminal.name},
        ip_address=ip_address,
    )
    session.delete(terminal)
    _commit(session, action="delete", failure_message="Failed to delete terminal")
    record_terminal_action("delete", "success")
    logger.info("terminal %s deleted", terminal_id)


__all__ = [
    "RetailerAccessError",
    "TerminalError",
    "TerminalHasSalesError",
    "TerminalNotFoundError",
    "TerminalPersistenceError",
    "create_terminal",
    "delete_terminal",
    "set_terminal_status",
]
