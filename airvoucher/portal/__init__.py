"""Client-side portal state built on the JSON API."""

from .client import PortalAPIError, PortalClient
from .layout import PortalLayout
from .sales_table import SalesTableState
from .session import SessionContext, SessionRecord, Subscription
from .terminal_board import TerminalBoard, TerminalView

__all__ = [
    "PortalAPIError",
    "PortalClient",
    "PortalLayout",
    "SalesTableState",
    "SessionContext",
    "SessionRecord",
    "Subscription",
    "TerminalBoard",
    "TerminalView",
]
