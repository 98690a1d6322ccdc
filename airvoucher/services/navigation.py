"""Role-based navigation and route gating for the portal layouts."""
from __future__ import annotations

from dataclasses import dataclass

from airvoucher.models import UserRole

SIGN_IN_PATH = "/auth"


@dataclass(slots=True, frozen=True)
class NavLink:
    name: str
    href: str
    icon: str


_NAVIGATION: dict[UserRole, tuple[NavLink, ...]] = {
    UserRole.ADMIN: (
        NavLink("Dashboard", "/admin", "layout-dashboard"),
        NavLink("Retailers", "/admin/retailers", "store"),
        NavLink("Agents", "/admin/agents", "users"),
        NavLink("Vouchers", "/admin/vouchers", "credit-card"),
        NavLink("Reports", "/admin/reports", "file-text"),
        NavLink("Commissions", "/admin/commissions", "percent"),
    ),
    UserRole.RETAILER: (
        NavLink("Dashboard", "/retailer", "shopping-cart"),
        NavLink("Terminals", "/retailer/terminals", "terminal"),
        NavLink("Account", "/retailer/account", "user"),
    ),
    UserRole.AGENT: (
        NavLink("Dashboard", "/agent", "layout-dashboard"),
        NavLink("Retailers", "/agent/retailers", "store"),
        NavLink("Commissions", "/agent/commissions", "percent"),
        NavLink("Sales History", "/agent/sales", "history"),
    ),
}


def navigation_for(role: UserRole | str) -> tuple[NavLink, ...]:
    return _NAVIGATION.get(UserRole(role), ())


def home_for_role(role: UserRole | str) -> str:
    links = navigation_for(role)
    return links[0].href if links else "/"


def portal_title(role: UserRole | str, retailer_name: str | None = None) -> str:
    """Retailers see their business name once it is known, everyone else the portal name."""
    role = UserRole(role)
    if role is UserRole.RETAILER and retailer_name:
        return retailer_name
    return f"{role.value.capitalize()} Portal"


def resolve_redirect(role: UserRole | str | None, required_role: UserRole | str) -> str | None:
    """Where to send a visitor of a role-protected page, or ``None`` to let them in.

    ``role`` is the signed-in user's role, ``None`` when nobody is signed in.
    """
    if role is None:
        return SIGN_IN_PATH
    if UserRole(role) is not UserRole(required_role):
        return home_for_role(role)
    return None


__all__ = [
    "NavLink",
    "SIGN_IN_PATH",
    "home_for_role",
    "navigation_for",
    "portal_title",
    "resolve_redirect",
]
