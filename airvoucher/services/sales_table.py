"""Filtering, sorting and pagination for the sales history table.

Everything in this module is a pure transformation over :class:`SaleRecord`
sequences. Routes fetch the records, build a :class:`FilterState` from the
query string and hand both to :func:`build_sales_page`.
"""
from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Literal

from airvoucher.schemas.sale import ProfitState, SaleRow

ALL = "all"
PAGE_SIZE = 10

SortField = Literal["date", "voucher_type", "amount", "retailer_name", "terminal_name", "ref_number"]
SortDirection = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = (
    "date",
    "voucher_type",
    "amount",
    "retailer_name",
    "terminal_name",
    "ref_number",
)

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")

_VOUCHER_INDICATORS = {
    "Mobile": "primary",
    "OTT": "purple",
    "Hollywoodbets": "green",
    "Ringa": "amber",
}
_DEFAULT_INDICATOR = "pink"


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(slots=True, frozen=True)
class SaleRecord:
    """One completed voucher sale as fetched for display."""

    id: str
    created_at: str
    voucher_type: str | None
    retailer_name: str | None
    amount: Decimal
    supplier_commission_pct: Decimal = Decimal("0")
    retailer_commission: Decimal = Decimal("0")
    agent_commission: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")
    terminal_name: str | None = None
    ref_number: str | None = None

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.created_at)

    @property
    def supplier_commission_amount(self) -> Decimal:
        return Decimal(self.amount) * (Decimal(self.supplier_commission_pct) / _HUNDRED)


@dataclass(slots=True, frozen=True)
class FilterState:
    """Search, filter, sort and page selections for the sales table."""

    search: str = ""
    voucher_type: str = ALL
    retailer_name: str = ALL
    terminal_name: str = ALL
    sort_field: str = "date"
    sort_direction: SortDirection = "desc"
    page: int = 1
    page_size: int = PAGE_SIZE

    def query_params(self) -> dict[str, str | int]:
        """Query string for `GET /api/sales`. The page size is chosen by the server."""
        return {
            "search": self.search,
            "voucher_type": self.voucher_type,
            "retailer_name": self.retailer_name,
            "terminal_name": self.terminal_name,
            "sort_field": self.sort_field,
            "sort_direction": self.sort_direction,
            "page": self.page,
        }


@dataclass(slots=True, frozen=True)
class SalesPage:
    """A single page of sales plus the counts needed to render pagination."""

    records: list[SaleRecord]
    total_count: int
    total_pages: int
    page: int
    page_size: int = PAGE_SIZE
    voucher_types: list[str] = field(default_factory=list)
    retailer_names: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    @property
    def start_index(self) -> int:
        """1-based position of the first row, 0 when there are no rows."""
        if self.is_empty:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        return min(self.page * self.page_size, self.total_count)


def _matches_search(sale: SaleRecord, term: str) -> bool:
    return (
        term in (sale.voucher_type or "").lower()
        or term in (sale.retailer_name or "").lower()
        or term in sale.id.lower()
    )


def filter_sales(records: Iterable[SaleRecord], state: FilterState) -> list[SaleRecord]:
    """Return the records matching every active predicate, in their original order."""
    term = state.search.lower()
    filtered: list[SaleRecord] = []
    for sale in records:
        if term and not _matches_search(sale, term):
            continue
        if state.voucher_type != ALL and sale.voucher_type != state.voucher_type:
            continue
        if state.retailer_name != ALL and sale.retailer_name != state.retailer_name:
            continue
        if state.terminal_name != ALL and sale.terminal_name != state.terminal_name:
            continue
        filtered.append(sale)
    return filtered


# terminal_name and ref_number are selectable but have no comparator, so the
# table keeps the fetched order for them.
_SORT_KEYS: dict[str, Callable[[SaleRecord], Any]] = {
    "date": lambda sale: sale.timestamp,
    "voucher_type": lambda sale: sale.voucher_type or "",
    "amount": lambda sale: Decimal(sale.amount),
    "retailer_name": lambda sale: sale.retailer_name or "",
}


def sort_sales(
    records: Iterable[SaleRecord], sort_field: str, direction: SortDirection = "desc"
) -> list[SaleRecord]:
    """Stable single-key sort. Unknown fields leave the order unchanged."""
    key = _SORT_KEYS.get(sort_field)
    if key is None:
        return list(records)
    return sorted(records, key=key, reverse=direction == "desc")


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, total: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(page, 1), page_count(total, page_size))


def paginate(records: Sequence[SaleRecord], page: int, page_size: int = PAGE_SIZE) -> SalesPage:
    """Slice one page out of ``records``, clamping ``page`` into range."""
    total = len(records)
    current = clamp_page(page, total, page_size)
    start = (current - 1) * page_size
    return SalesPage(
        records=list(records[start : start + page_size]),
        total_count=total,
        total_pages=page_count(total, page_size),
        page=current,
        page_size=page_size,
    )


def sale_facets(records: Iterable[SaleRecord]) -> tuple[list[str], list[str]]:
    """Distinct voucher types and retailer names for the filter dropdowns."""
    voucher_types: set[str] = set()
    retailer_names: set[str] = set()
    for sale in records:
        if sale.voucher_type:
            voucher_types.add(sale.voucher_type)
        if sale.retailer_name:
            retailer_names.add(sale.retailer_name)
    return sorted(voucher_types), sorted(retailer_names)


def build_sales_page(records: Sequence[SaleRecord], state: FilterState) -> SalesPage:
    """Run the filter, sort and paginate pipeline for one table render."""
    filtered = filter_sales(records, state)
    ordered = sort_sales(filtered, state.sort_field, state.sort_direction)
    page = paginate(ordered, state.page, state.page_size)
    voucher_types, retailer_names = sale_facets(records)
    return replace(page, voucher_types=voucher_types, retailer_names=retailer_names)


def format_money(value: Decimal | int | float, prefix: str = "R") -> str:
    amount = Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return f"{prefix} {amount:.2f}"


def format_sale_date(value: datetime) -> str:
    return f"{value.day} {value:%b %Y}, {value:%H:%M}"


def profit_state(profit: Decimal | int | float) -> ProfitState:
    return "negative" if Decimal(str(profit)) < 0 else "non_negative"


def voucher_indicator(voucher_type: str | None) -> str:
    return _VOUCHER_INDICATORS.get(voucher_type or "", _DEFAULT_INDICATOR)


def present_sale(sale: SaleRecord, *, currency_prefix: str = "R") -> SaleRow:
    """Build the display row for a sale."""
    return SaleRow(
        id=sale.id,
        created_at=sale.created_at,
        date=format_sale_date(sale.timestamp),
        voucher_type=sale.voucher_type or "Unknown",
        voucher_indicator=voucher_indicator(sale.voucher_type),
        retailer_name=sale.retailer_name or "Unknown",
        terminal_name=sale.terminal_name,
        ref_number=sale.ref_number,
        amount=format_money(sale.amount, currency_prefix),
        supplier_commission=format_money(sale.supplier_commission_amount, currency_prefix),
        retailer_commission=format_money(sale.retailer_commission, currency_prefix),
        agent_commission=format_money(sale.agent_commission, currency_prefix),
        profit=format_money(sale.profit, currency_prefix),
        profit_state=profit_state(sale.profit),
    )


__all__ = [
    "ALL",
    "PAGE_SIZE",
    "SORT_FIELDS",
    "FilterState",
    "SaleRecord",
    "SalesPage",
    "SortDirection",
    "SortField",
    "build_sales_page",
    "clamp_page",
    "filter_sales",
    "format_money",
    "format_sale_date",
    "page_count",
    "paginate",
    "parse_timestamp",
    "present_sale",
    "profit_state",
    "sale_facets",
    "sort_sales",
    "voucher_indicator",
]
