"""Pydantic schemas package."""

from .retailer import NavigationResponse, NavItem, RetailerRead
from .sale import (
    DashboardResponse,
    DashboardSummary,
    SaleRow,
    SalesDataPoint,
    SalesPageResponse,
    VoucherTypeSales,
)
from .terminal import (
    TerminalContact,
    TerminalCreateRequest,
    TerminalDeleted,
    TerminalDeleteRequest,
    TerminalEnvelope,
    TerminalListing,
    TerminalRead,
    TerminalStatusRequest,
)

__all__ = [
    "DashboardResponse",
    "DashboardSummary",
    "NavItem",
    "NavigationResponse",
    "RetailerRead",
    "SaleRow",
    "SalesDataPoint",
    "SalesPageResponse",
    "TerminalContact",
    "TerminalCreateRequest",
    "TerminalDeleteRequest",
    "TerminalDeleted",
    "TerminalEnvelope",
    "TerminalListing",
    "TerminalRead",
    "TerminalStatusRequest",
    "VoucherTypeSales",
]
