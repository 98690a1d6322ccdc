"""Dashboard aggregates computed from fetched sale records."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from airvoucher.schemas.sale import DashboardSummary, SalesDataPoint, VoucherTypeSales
from airvoucher.services.sales_table import SaleRecord, format_money

_ZERO = Decimal("0")


def _sale_date(sale: SaleRecord) -> date:
    # Grouping uses the calendar date written in the timestamp itself.
    return date.fromisoformat(sale.created_at.strip()[:10])


def _format_day(day: date) -> str:
    return f"{day:%b} {day.day}"


def daily_sales_series(records: Iterable[SaleRecord]) -> list[SalesDataPoint]:
    """Sum sale amounts per day.

    With two or more distinct days, every day between the first and last is
    present and days without sales carry ``0``.
    """
    totals: dict[date, Decimal] = defaultdict(lambda: _ZERO)
    for sale in records:
        totals[_sale_date(sale)] += Decimal(sale.amount)
    if not totals:
        return []

    days = sorted(totals)
    if len(days) >= 2:
        span = (days[-1] - days[0]).days
        days = [days[0] + timedelta(days=offset) for offset in range(span + 1)]

    return [
        SalesDataPoint(date=day, formatted_date=_format_day(day), amount=totals.get(day, _ZERO))
        for day in days
    ]


def voucher_type_breakdown(records: Iterable[SaleRecord]) -> list[VoucherTypeSales]:
    """Total sale amount per voucher type, largest first."""
    totals: dict[str, Decimal] = {}
    for sale in records:
        name = sale.voucher_type or "Unknown"
        totals[name] = totals.get(name, _ZERO) + Decimal(sale.amount)
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [VoucherTypeSales(name=name, value=value) for name, value in ordered]


def summarize_sales(records: Sequence[SaleRecord], *, now: datetime | None = None) -> DashboardSummary:
    """Today, last seven days, current month and commission totals."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    today = now.date()
    week_start = now - timedelta(days=7)

    today_sales = week_sales = month_sales = commission = _ZERO
    today_count = 0
    for sale in records:
        amount = Decimal(sale.amount)
        moment = sale.timestamp.astimezone(now.tzinfo)
        commission += Decimal(sale.retailer_commission)
        if moment.date() == today:
            today_sales += amount
            today_count += 1
        if week_start <= moment <= now:
            week_sales += amount
        if (moment.year, moment.month) == (now.year, now.month):
            month_sales += amount

    return DashboardSummary(
        today_sales=today_sales,
        today_count=today_count,
        week_sales=week_sales,
        month_sales=month_sales,
        commission_earned=commission,
    )


def format_summary(summary: DashboardSummary, *, currency_prefix: str = "R") -> dict[str, str]:
    """Display strings for the dashboard stat tiles."""
    return {
        "today_sales": format_money(summary.today_sales, currency_prefix),
        "today_subtitle": f"{summary.today_count} transactions",
        "week_sales": format_money(summary.week_sales, currency_prefix),
        "month_sales": format_money(summary.month_sales, currency_prefix),
        "commission_earned": format_money(summary.commission_earned, currency_prefix),
    }


__all__ = [
    "daily_sales_series",
    "format_summary",
    "summarize_sales",
    "voucher_type_breakdown",
]
