from __future__ import annotations

from types import SimpleNamespace

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from airvoucher.models import AuditLog, Terminal, TerminalStatus


def test_create_terminal_starts_active(client, portal: SimpleNamespace, retailer_headers, db_session: Session) -> None:
    response = client.post(
        "/api/retailer/terminals/create",
        json={"retailerId": portal.corner_id, "name": "Till 3"},
        headers=retailer_headers,
    )

    assert response.status_code == 201
    terminal = response.json()["terminal"]
    assert terminal["name"] == "Till 3"
    assert terminal["status"] == "active"
    stored = db_session.get(Terminal, terminal["id"])
    assert stored is not None
    assert stored.retailer_id == portal.corner_id

    audit = db_session.scalars(select(AuditLog).where(AuditLog.resource_id == terminal["id"])).one()
    assert audit.action == "terminal.create"
    assert audit.actor_id == "user-retailer"


def test_create_terminal_missing_fields_is_bad_request(client, portal, retailer_headers) -> None:
    missing_name = client.post(
        "/api/retailer/terminals/create",
        json={"retailerId": portal.corner_id},
        headers=retailer_headers,
    )
    empty_retailer = client.post(
        "/api/retailer/terminals/create",
        json={"retailerId": "", "name": "Till 3"},
        headers=retailer_headers,
    )

    assert missing_name.status_code == 400
    assert missing_name.json() == {"error": "Missing required fields"}
    assert empty_retailer.status_code == 400
    assert empty_retailer.json() == {"error": "Missing required fields"}


def test_create_terminal_blank_name_is_bad_request(client, portal, retailer_headers, db_session: Session) -> None:
    response = client.post(
        "/api/retailer/terminals/create",
        json={"retailerId": portal.corner_id, "name": "   "},
        headers=retailer_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    names = db_session.scalars(select(Terminal.name).where(Terminal.retailer_id == portal.corner_id)).all()
    assert sorted(names) == ["Till 1", "Till 2"]


def test_create_terminal_requires_authentication(client, portal) -> None:
    response = client.post(
        "/api/retailer/terminals/create",
        json={"retailerId": portal.corner_id, "name": "Till 3"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_create_terminal_for_foreign_or_unknown_retailer_is_forbidden(
    client, portal, retailer_headers, db_session: Session
) -> None:
    for retailer_id in (portal.rival_id, "retailer-missing"):
        response = client.post(
            "/api/retailer/terminals/create",
            json={"retailerId": retailer_id, "name": "Sneaky Till"},
            headers=retailer_headers,
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Not authorized to manage this retailer"}

    names = set(db_session.scalars(select(Terminal.name)))
    assert "Sneaky Till" not in names


def test_toggle_status_round_trip(client, portal, retailer_headers, db_session: Session) -> None:
    deactivate = client.post(
        "/api/retailer/terminals/toggle-status",
        json={"terminalId": portal.till_with_sales, "status": "inactive"},
        headers=retailer_headers,
    )
    assert deactivate.status_code == 200
    assert deactivate.json()["terminal"]["status"] == "inactive"

    reactivate = client.post(
        "/api/retailer/terminals/toggle-status",
        json={"terminalId": portal.till_with_sales, "status": "active"},
        headers=retailer_headers,
    )
    assert reactivate.status_code == 200
    db_session.expire_all()
    assert db_session.get(Terminal, portal.till_with_sales).status is TerminalStatus.ACTIVE


def test_toggle_status_rejects_unknown_status(client, portal, retailer_headers) -> None:
    response = client.post(
        "/api/retailer/terminals/toggle-status",
        json={"terminalId": portal.till_without_sales, "status": "paused"},
        headers=retailer_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status value"}


def test_toggle_status_of_foreign_terminal_is_forbidden(client, portal, retailer_headers, db_session: Session) -> None:
    response = client.post(
        "/api/retailer/terminals/toggle-status",
        json={"terminalId": portal.rival_terminal, "status": "inactive"},
        headers=retailer_headers,
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Not authorized to manage this terminal"}
    db_session.expire_all()
    assert db_session.get(Terminal, portal.rival_terminal).status is TerminalStatus.ACTIVE


def test_toggle_status_of_missing_terminal_is_not_found(client, portal, retailer_headers) -> None:
    response = client.post(
        "/api/retailer/terminals/toggle-status",
        json={"terminalId": "terminal-missing", "status": "inactive"},
        headers=retailer_headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Terminal not found"}


def test_delete_terminal_without_sales(client, portal, retailer_headers, db_session: Session) -> None:
    response = client.post(
        "/api/retailer/terminals/delete",
        json={"terminalId": portal.till_without_sales},
        headers=retailer_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"deleted": portal.till_without_sales}
    db_session.expire_all()
    assert db_session.get(Terminal, portal.till_without_sales) is None


def test_delete_terminal_with_sales_is_conflict(client, portal, retailer_headers, db_session: Session) -> None:
    response = client.post(
        "/api/retailer/terminals/delete",
        json={"terminalId": portal.till_with_sales},
        headers=retailer_headers,
    )

    assert response.status_code == 409
    assert response.json() == {"error": "Cannot delete terminal with sales history"}
    db_session.expire_all()
    assert db_session.get(Terminal, portal.till_with_sales) is not None


def test_delete_foreign_terminal_is_forbidden(client, portal, retailer_headers, db_session: Session) -> None:
    response = client.post(
        "/api/retailer/terminals/delete",
        json={"terminalId": portal.rival_terminal},
        headers=retailer_headers,
    )

    assert response.status_code == 403
    db_session.expire_all()
    assert db_session.get(Terminal, portal.rival_terminal) is not None


def test_lifecycle_endpoints_only_accept_post(client, portal, retailer_headers) -> None:
    for action in ("create", "toggle-status", "delete"):
        response = client.get(f"/api/retailer/terminals/{action}", headers=retailer_headers)
        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}


def test_toggle_status_commit_failure_is_generic_server_error(
    client, portal, retailer_headers, db_session: Session, monkeypatch
) -> None:
    def failing_commit() -> None:
        raise SQLAlchemyError("disk full at /var/lib/postgresql secret detail")

    monkeypatch.setattr(db_session, "commit", failing_commit)

    response = client.post(
        "/api/retailer/terminals/toggle-status",
        json={"terminalId": portal.till_without_sales, "status": "inactive"},
        headers=retailer_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to update terminal status"}
    assert "secret detail" not in response.text
    db_session.expire_all()
    assert db_session.get(Terminal, portal.till_without_sales).status is TerminalStatus.ACTIVE
    assert db_session.scalars(select(AuditLog).where(AuditLog.resource_id == portal.till_without_sales)).all() == []


def test_create_terminal_flush_failure_stores_nothing(
    client, portal, retailer_headers, db_session: Session, monkeypatch
) -> None:
    def failing_flush(*args, **kwargs) -> None:
        raise SQLAlchemyError("constraint terminals_pkey secret detail")

    monkeypatch.setattr(db_session, "flush", failing_flush)

    response = client.post(
        "/api/retailer/terminals/create",
        json={"retailerId": portal.corner_id, "name": "Till 3"},
        headers=retailer_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create terminal"}
    assert "secret detail" not in response.text
    monkeypatch.undo()
    db_session.expire_all()
    names = db_session.scalars(select(Terminal.name).where(Terminal.retailer_id == portal.corner_id)).all()
    assert sorted(names) == ["Till 1", "Till 2"]
