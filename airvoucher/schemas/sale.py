"""Pydantic schemas for sales table and dashboard responses."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

ProfitState = Literal["negative", "non_negative"]


class SaleRow(BaseModel):
    id: str
    created_at: str
    date: str
    voucher_type: str
    voucher_indicator: str
    retailer_name: str
    terminal_name: str | None = None
    ref_number: str | None = None
    amount: str
    supplier_commission: str
    retailer_commission: str
    agent_commission: str
    profit: str
    profit_state: ProfitState


class SalesPageResponse(BaseModel):
    items: list[SaleRow]
    total_count: int
    total_pages: int
    page: int
    page_size: int
    start_index: int
    end_index: int
    is_empty: bool
    voucher_types: list[str] = Field(default_factory=list)
    retailer_names: list[str] = Field(default_factory=list)


class SalesDataPoint(BaseModel):
    date: date
    formatted_date: str
    amount: Decimal


class VoucherTypeSales(BaseModel):
    name: str
    value: Decimal


class DashboardSummary(BaseModel):
    today_sales: Decimal
    today_count: int
    week_sales: Decimal
    month_sales: Decimal
    commission_earned: Decimal


class DashboardResponse(BaseModel):
    retailer_name: str
    summary: DashboardSummary
    formatted: dict[str, str]
    time_series: list[SalesDataPoint]
    voucher_types: list[VoucherTypeSales]


__all__ = [
    "DashboardResponse",
    "DashboardSummary",
    "ProfitState",
    "SaleRow",
    "SalesDataPoint",
    "SalesPageResponse",
    "VoucherTypeSales",
]
