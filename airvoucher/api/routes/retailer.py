"""Read endpoints backing the retailer portal pages."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from airvoucher.api.deps import get_db_session
from airvoucher.api.routes.auth import AuthenticatedUser, require_role
from airvoucher.core.config import get_settings
from airvoucher.models import Retailer, UserRole
from airvoucher.schemas.retailer import RetailerRead
from airvoucher.schemas.sale import DashboardResponse
from airvoucher.schemas.terminal import TerminalContact, TerminalListing
from airvoucher.services.retailers import (
    RetailerNotFoundError,
    fetch_my_retailer,
    fetch_sales,
    fetch_terminals,
)
from airvoucher.services.sales_reports import (
    daily_sales_series,
    format_summary,
    summarize_sales,
    voucher_type_breakdown,
)

router = APIRouter(prefix="/retailer")

WEEK_WINDOW = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def dashboard_window_start(now: datetime) -> datetime:
    """Earliest sale the dashboard needs: the start of the month or seven days back."""
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return min(now - WEEK_WINDOW, month_start)


def _my_retailer(session: Session, user: AuthenticatedUser) -> Retailer:
    try:
        return fetch_my_retailer(session, user_id=user.user_id)
    except RetailerNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Could not load retailer profile"
        ) from exc


@router.get("/me", response_model=RetailerRead)
def my_retailer(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_role(UserRole.RETAILER)),
) -> RetailerRead:
    return RetailerRead.model_validate(_my_retailer(session, user))


@router.get("/terminals", response_model=list[TerminalListing])
def list_terminals(
    search: str | None = Query(default=None, max_length=255),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_role(UserRole.RETAILER)),
) -> list[TerminalListing]:
    retailer = _my_retailer(session, user)
    listings = fetch_terminals(session, retailer_id=retailer.id, search=search)
    return [
        TerminalListing(
            id=item.terminal.id,
            name=item.terminal.name,
            status=item.terminal.status,
            last_active=item.terminal.last_active,
            has_sales=item.has_sales,
            user_profile=(
                TerminalContact.model_validate(item.terminal.user_profile)
                if item.terminal.user_profile is not None
                else None
            ),
        )
        for item in listings
    ]


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_role(UserRole.RETAILER)),
) -> DashboardResponse:
    settings = get_settings()
    retailer = _my_retailer(session, user)
    now = _utcnow()
    records = fetch_sales(session, user_id=user.user_id, role=user.role, since=dashboard_window_start(now))
    summary = summarize_sales(records, now=now)
    # Commission earned is to date, not just for the fetched window.
    summary = summary.model_copy(update={"commission_earned": retailer.commission_balance})
    return DashboardResponse(
        retailer_name=retailer.name,
        summary=summary,
        formatted=format_summary(summary, currency_prefix=settings.currency_prefix),
        time_series=daily_sales_series(records),
        voucher_types=voucher_type_breakdown(records),
    )


__all__ = ["dashboard", "dashboard_window_start", "list_terminals", "my_retailer", "router"]
