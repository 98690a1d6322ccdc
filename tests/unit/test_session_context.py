from __future__ import annotations

import pytest

from airvoucher.models import UserRole
from airvoucher.portal.session import SessionContext, SessionRecord, SessionStatus

RECORD = SessionRecord(user_id="user-1", email="rita@example.com", role=UserRole.RETAILER)


def test_subscribers_receive_every_change() -> None:
    context = SessionContext()
    seen: list[SessionRecord | None] = []
    context.subscribe(seen.append)

    context.set(RECORD)
    context.clear()

    assert seen == [RECORD, None]
    assert context.current is None
    assert context.status is SessionStatus.READY


def test_unsubscribe_stops_notifications_and_is_idempotent() -> None:
    context = SessionContext()
    seen: list[SessionRecord | None] = []
    subscription = context.subscribe(seen.append)

    subscription.unsubscribe()
    subscription.unsubscribe()
    context.set(RECORD)

    assert seen == []
    assert not subscription.active
    assert context.listener_count == 0


def test_subscription_context_manager_releases_listener() -> None:
    context = SessionContext()
    with context.subscribe(lambda _: None):
        assert context.listener_count == 1
    assert context.listener_count == 0


def test_listener_may_unsubscribe_during_notification() -> None:
    context = SessionContext()
    calls: list[str] = []
    holder: dict[str, object] = {}

    def once(_: SessionRecord | None) -> None:
        calls.append("once")
        holder["subscription"].unsubscribe()  # type: ignore[attr-defined]

    holder["subscription"] = context.subscribe(once)
    context.subscribe(lambda _: calls.append("always"))

    context.set(RECORD)
    context.set(RECORD)

    assert calls == ["once", "always", "always"]


def test_closed_context_rejects_use() -> None:
    context = SessionContext()
    context.subscribe(lambda _: None)
    context.close()

    assert context.status is SessionStatus.CLOSED
    assert context.listener_count == 0
    with pytest.raises(RuntimeError):
        context.subscribe(lambda _: None)
    with pytest.raises(RuntimeError):
        context.set(RECORD)
