"""Navigation layout endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from airvoucher.api.deps import get_db_session
from airvoucher.api.routes.auth import AuthenticatedUser, get_current_user
from airvoucher.models import UserRole
from airvoucher.schemas.retailer import NavigationResponse, NavItem
from airvoucher.services.navigation import navigation_for, portal_title
from airvoucher.services.retailers import RetailerNotFoundError, fetch_my_retailer

router = APIRouter()


@router.get("/navigation", response_model=NavigationResponse)
def navigation(
    path: str = Query(default="/"),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> NavigationResponse:
    retailer_name = None
    if user.role is UserRole.RETAILER:
        try:
            retailer_name = fetch_my_retailer(session, user_id=user.user_id).name
        except RetailerNotFoundError:
            retailer_name = None

    items = [
        NavItem(name=link.name, href=link.href, icon=link.icon, active=link.href == path)
        for link in navigation_for(user.role)
    ]
    return NavigationResponse(
        title=portal_title(user.role, retailer_name),
        role=user.role.value,
        items=items,
    )


__all__ = ["navigation", "router"]
