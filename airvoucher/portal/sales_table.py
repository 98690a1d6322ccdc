"""Client-side state for the sales history table."""
from __future__ import annotations

from dataclasses import replace
from typing import Any

from airvoucher.services.sales_table import ALL, FilterState, SortDirection


class SalesTableState:
    """Tracks the table controls and the last page returned by the server.

    Changing a search term, filter or sort column sends the table back to
    page 1. The server clamps out-of-range pages and :meth:`apply` syncs to
    whatever page it actually returned.
    """

    def __init__(self, state: FilterState | None = None) -> None:
        self.state = state or FilterState()
        self.filters_open = False
        self.rows: list[dict[str, Any]] = []
        self.total_count = 0
        self.total_pages = 1
        self.voucher_types: list[str] = []
        self.retailer_names: list[str] = []

    def _update(self, **changes: Any) -> FilterState:
        self.state = replace(self.state, **changes)
        return self.state

    def set_search(self, term: str) -> FilterState:
        return self._update(search=term, page=1)

    def set_voucher_type(self, voucher_type: str = ALL) -> FilterState:
        return self._update(voucher_type=voucher_type, page=1)

    def set_retailer(self, retailer_name: str = ALL) -> FilterState:
        return self._update(retailer_name=retailer_name, page=1)

    def set_terminal(self, terminal_name: str = ALL) -> FilterState:
        return self._update(terminal_name=terminal_name, page=1)

    def sort_by(self, field: str) -> FilterState:
        """Clicking the active column flips direction, a new column starts descending."""
        direction: SortDirection = "desc"
        if field == self.state.sort_field:
            direction = "asc" if self.state.sort_direction == "desc" else "desc"
        return self._update(sort_field=field, sort_direction=direction, page=1)

    def go_to(self, page: int) -> FilterState:
        return self._update(page=min(max(page, 1), self.total_pages))

    def next_page(self) -> FilterState:
        return self.go_to(self.state.page + 1)

    def previous_page(self) -> FilterState:
        return self.go_to(self.state.page - 1)

    @property
    def has_next(self) -> bool:
        return self.state.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.state.page > 1

    def toggle_filters(self) -> bool:
        self.filters_open = not self.filters_open
        return self.filters_open

    def to_filter_state(self) -> FilterState:
        return self.state

    def query_params(self) -> dict[str, str | int]:
        return self.state.query_params()

    def apply(self, response: dict[str, Any]) -> None:
        """Store a ``/api/sales`` response body."""
        self.rows = list(response.get("items", []))
        self.total_count = int(response.get("total_count", 0))
        self.total_pages = int(response.get("total_pages", 1))
        self.voucher_types = list(response.get("voucher_types", []))
        self.retailer_names = list(response.get("retailer_names", []))
        page = int(response.get("page", self.state.page))
        if page != self.state.page:
            self._update(page=page)


__all__ = ["SalesTableState"]
