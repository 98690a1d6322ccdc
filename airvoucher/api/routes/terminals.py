"""Terminal lifecycle endpoints for retailers."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from airvoucher.api.deps import get_db_session
from airvoucher.api.routes.auth import AuthenticatedUser, get_current_user
from airvoucher.schemas.terminal import (
    TerminalCreateRequest,
    TerminalDeleted,
    TerminalDeleteRequest,
    TerminalEnvelope,
    TerminalRead,
    TerminalStatusRequest,
)
from airvoucher.services.terminals import (
    RetailerAccessError,
    TerminalError,
    TerminalHasSalesError,
    TerminalNotFoundError,
    TerminalPersistenceError,
    create_terminal,
    delete_terminal,
    set_terminal_status,
)

router = APIRouter(prefix="/retailer/terminals")


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def _as_http_error(exc: TerminalError) -> HTTPException:
    if isinstance(exc, RetailerAccessError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, TerminalNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, TerminalHasSalesError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, TerminalPersistenceError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.post("/create", response_model=TerminalEnvelope, status_code=status.HTTP_201_CREATED)
def create(
    payload: TerminalCreateRequest,
    request: Request,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> TerminalEnvelope:
    try:
        terminal = create_terminal(
            session,
            retailer_id=payload.retailer_id,
            name=payload.name,
            actor_id=user.user_id,
            ip_address=_client_ip(request),
        )
    except TerminalError as exc:
        raise _as_http_error(exc) from exc
    return TerminalEnvelope(terminal=TerminalRead.model_validate(terminal))


@router.post("/toggle-status", response_model=TerminalEnvelope)
def toggle_status(
    payload: TerminalStatusRequest,
    request: Request,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> TerminalEnvelope:
    try:
        terminal = set_terminal_status(
            session,
            terminal_id=payload.terminal_id,
            status=payload.status,
            actor_id=user.user_id,
            ip_address=_client_ip(request),
        )
    except TerminalError as exc:
        raise _as_http_error(exc) from exc
    return TerminalEnvelope(terminal=TerminalRead.model_validate(terminal))


@router.post("/delete", response_model=TerminalDeleted)
def delete(
    payload: TerminalDeleteRequest,
    request: Request,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> TerminalDeleted:
    try:
        delete_terminal(
            session,
            terminal_id=payload.terminal_id,
            actor_id=user.user_id,
            ip_address=_client_ip(request),
        )
    except TerminalError as exc:
        raise _as_http_error(exc) from exc
    return TerminalDeleted(deleted=payload.terminal_id)


__all__ = ["create", "delete", "router", "toggle_status"]
