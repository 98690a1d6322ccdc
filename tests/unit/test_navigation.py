from __future__ import annotations

import pytest

from airvoucher.models import UserRole
from airvoucher.services.navigation import (
    SIGN_IN_PATH,
    home_for_role,
    navigation_for,
    portal_title,
    resolve_redirect,
)


def test_retailer_navigation_links() -> None:
    links = navigation_for(UserRole.RETAILER)
    assert [(link.name, link.href) for link in links] == [
        ("Dashboard", "/retailer"),
        ("Terminals", "/retailer/terminals"),
        ("Account", "/retailer/account"),
    ]


def test_terminal_role_has_no_portal() -> None:
    assert navigation_for(UserRole.TERMINAL) == ()
    assert home_for_role(UserRole.TERMINAL) == "/"


@pytest.mark.parametrize(
    ("role", "retailer_name", "expected"),
    [
        (UserRole.RETAILER, "Corner Shop", "Corner Shop"),
        (UserRole.RETAILER, None, "Retailer Portal"),
        (UserRole.ADMIN, "Corner Shop", "Admin Portal"),
        ("agent", None, "Agent Portal"),
    ],
)
def test_portal_title(role: UserRole | str, retailer_name: str | None, expected: str) -> None:
    assert portal_title(role, retailer_name) == expected


def test_anonymous_visitors_go_to_sign_in() -> None:
    assert resolve_redirect(None, UserRole.RETAILER) == SIGN_IN_PATH


def test_wrong_role_goes_to_own_home() -> None:
    assert resolve_redirect(UserRole.AGENT, UserRole.RETAILER) == "/agent"
    assert resolve_redirect("admin", "retailer") == "/admin"


def test_matching_role_is_let_in() -> None:
    assert resolve_redirect(UserRole.RETAILER, UserRole.RETAILER) is None
