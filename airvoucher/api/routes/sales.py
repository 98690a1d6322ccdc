"""Sales history table endpoint shared by every portal role."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from airvoucher.api.deps import get_db_session
from airvoucher.api.routes.auth import AuthenticatedUser, require_role
from airvoucher.core.config import get_settings
from airvoucher.models import UserRole
from airvoucher.schemas.sale import SalesPageResponse
from airvoucher.services.retailers import fetch_sales
from airvoucher.services.sales_table import (
    ALL,
    FilterState,
    SortDirection,
    build_sales_page,
    present_sale,
)

router = APIRouter()


@router.get("/sales", response_model=SalesPageResponse, summary="Filtered, sorted page of sales")
def list_sales(
    search: str = Query(default="", max_length=255),
    voucher_type: str = Query(default=ALL),
    retailer_name: str = Query(default=ALL),
    terminal_name: str = Query(default=ALL),
    sort_field: str = Query(default="date"),
    sort_direction: SortDirection = Query(default="desc"),
    page: int = Query(default=1),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(
        require_role(UserRole.ADMIN, UserRole.RETAILER, UserRole.AGENT)
    ),
) -> SalesPageResponse:
    settings = get_settings()
    state = FilterState(
        search=search,
        voucher_type=voucher_type,
        retailer_name=retailer_name,
        terminal_name=terminal_name,
        sort_field=sort_field,
        sort_direction=sort_direction,
        page=page,
        page_size=settings.sales_page_size,
    )
    records = fetch_sales(session, user_id=user.user_id, role=user.role)
    result = build_sales_page(records, state)
    return SalesPageResponse(
        items=[present_sale(sale, currency_prefix=settings.currency_prefix) for sale in result.records],
        total_count=result.total_count,
        total_pages=result.total_pages,
        page=result.page,
        page_size=result.page_size,
        start_index=result.start_index,
        end_index=result.end_index,
        is_empty=result.is_empty,
        voucher_types=result.voucher_types,
        retailer_names=result.retailer_names,
    )


__all__ = ["list_sales", "router"]
