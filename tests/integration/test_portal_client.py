from __future__ import annotations

import pytest

from airvoucher.models import TerminalStatus, UserRole
from airvoucher.portal import PortalAPIError, PortalClient, PortalLayout, SalesTableState, TerminalBoard

PASSWORD = "changeme"


@pytest.fixture()
def portal_client(client, portal) -> PortalClient:  # type: ignore[no-untyped-def]
    return PortalClient(client)


def test_sign_in_publishes_session(portal_client: PortalClient) -> None:
    seen = []
    portal_client.session_context.subscribe(seen.append)

    record = portal_client.login("retailer@example.com", PASSWORD)

    assert record.role is UserRole.RETAILER
    assert seen == [record]
    portal_client.sign_out()
    assert seen[-1] is None
    assert not portal_client.is_authenticated


def test_bad_credentials_raise_api_error(portal_client: PortalClient) -> None:
    with pytest.raises(PortalAPIError) as excinfo:
        portal_client.login("retailer@example.com", "wrong")

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid credentials"
    assert portal_client.session_context.current is None


def test_terminal_board_against_api(portal_client: PortalClient, portal) -> None:  # type: ignore[no-untyped-def]
    portal_client.login("retailer@example.com", PASSWORD)
    board = TerminalBoard(portal_client)
    board.load()

    assert board.retailer_id == portal.corner_id
    assert [terminal.name for terminal in board.terminals] == ["Till 1", "Till 2"]

    assert board.toggle(portal.till_without_sales) is True
    till_2 = next(t for t in board.terminals if t.id == portal.till_without_sales)
    assert till_2.status is TerminalStatus.INACTIVE

    assert board.delete(portal.till_with_sales) is False
    assert board.last_error == "Failed to delete terminal: Cannot delete terminal with sales history"

    created = board.add("Till 3")
    assert created is not None
    assert [terminal.name for terminal in board.terminals] == ["Till 1", "Till 2", "Till 3"]

    assert board.delete(created.id) is True
    assert [terminal.name for terminal in board.terminals] == ["Till 1", "Till 2"]


def test_sales_table_round_trip(portal_client: PortalClient) -> None:
    portal_client.login("admin@example.com", PASSWORD)
    table = SalesTableState()

    table.sort_by("amount")
    table.sort_by("amount")
    table.apply(portal_client.fetch_sales(table.to_filter_state()))

    assert [row["id"] for row in table.rows] == ["sale-rival", "sale-mobile", "sale-ott"]
    assert table.retailer_names == ["Corner Shop", "Rival Store"]


def test_layout_follows_sign_in_and_out(portal_client: PortalClient) -> None:
    layout = PortalLayout(
        portal_client.session_context, portal_client, role=UserRole.RETAILER, pathname="/retailer"
    )
    assert layout.redirect == "/auth"

    portal_client.login("retailer@example.com", PASSWORD)
    assert layout.redirect is None
    assert layout.title == "Corner Shop"

    assert layout.sign_out() == "/"
    assert layout.redirect == "/auth"
    assert layout.title == "Retailer Portal"
    layout.close()
