"""ORM models package."""
from .audit_log import AuditLog
from .base import Base, TimestampMixin
from .retailer import Retailer, RetailerStatus
from .sale import Sale
from .terminal import Terminal, TerminalStatus
from .user import User, UserRole, UserStatus

__all__ = [
    "AuditLog",
    "Base",
    "Retailer",
    "RetailerStatus",
    "Sale",
    "Terminal",
    "TerminalStatus",
    "TimestampMixin",
    "User",
    "UserRole",
    "UserStatus",
]
