from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_suite.db")
os.environ.setdefault("ENABLE_TRACING", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from airvoucher.api.deps import get_db_session
from airvoucher.api.routes.auth import hash_password, refresh_token_store
from airvoucher.main import app
from airvoucher.models import Base, Retailer, Sale, Terminal, TerminalStatus, User, UserRole

DATABASE_URL = "sqlite+pysqlite:///./test_suite.db"
PASSWORD = "changeme"
PASSWORD_HASH = hash_password(PASSWORD)


engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def reset_refresh_store() -> Iterator[None]:
    refresh_token_store.reset()
    yield
    refresh_token_store.reset()


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


def _user(session: Session, *, user_id: str, email: str, role: UserRole, full_name: str) -> User:
    user = User(id=user_id, email=email, full_name=full_name, role=role, hashed_password=PASSWORD_HASH)
    session.add(user)
    return user


@pytest.fixture()
def portal(db_session: Session) -> SimpleNamespace:
    """Two retailers with an agent and an admin.

    ``Corner Shop`` owns ``Till 1`` (two sales) and ``Till 2`` (no sales).
    ``Rival Store`` owns ``Rival Till`` (one sale) and has no agent.
    """
    _user(db_session, user_id="user-admin", email="admin@example.com", role=UserRole.ADMIN, full_name="Ada Admin")
    _user(db_session, user_id="user-agent", email="agent@example.com", role=UserRole.AGENT, full_name="Alex Agent")
    _user(
        db_session,
        user_id="user-retailer",
        email="retailer@example.com",
        role=UserRole.RETAILER,
        full_name="Rita Retailer",
    )
    _user(
        db_session,
        user_id="user-rival",
        email="rival@example.com",
        role=UserRole.RETAILER,
        full_name="Ron Rival",
    )
    db_session.flush()

    corner = Retailer(
        id="retailer-corner",
        name="Corner Shop",
        user_profile_id="user-retailer",
        agent_profile_id="user-agent",
        commission_balance=Decimal("125.50"),
    )
    rival = Retailer(
        id="retailer-rival",
        name="Rival Store",
        user_profile_id="user-rival",
        commission_balance=Decimal("0"),
    )
    db_session.add_all([corner, rival])
    db_session.flush()

    db_session.add_all(
        [
            Terminal(id="terminal-till-1", retailer_id=corner.id, name="Till 1", status=TerminalStatus.ACTIVE),
            Terminal(id="terminal-till-2", retailer_id=corner.id, name="Till 2", status=TerminalStatus.ACTIVE),
            Terminal(id="terminal-rival", retailer_id=rival.id, name="Rival Till", status=TerminalStatus.ACTIVE),
        ]
    )
    db_session.flush()

    now = datetime.now(timezone.utc)
    db_session.add_all(
        [
            Sale(
                id="sale-mobile",
                terminal_id="terminal-till-1",
                voucher_type="Mobile",
                ref_number="REF-001",
                amount=Decimal("50.00"),
                supplier_commission_pct=Decimal("3.00"),
                retailer_commission=Decimal("2.50"),
                agent_commission=Decimal("0.50"),
                profit=Decimal("1.50"),
                created_at=now - timedelta(days=3),
            ),
            Sale(
                id="sale-ott",
                terminal_id="terminal-till-1",
                voucher_type="OTT",
                ref_number="REF-002",
                amount=Decimal("100.00"),
                supplier_commission_pct=Decimal("5.00"),
                retailer_commission=Decimal("3.00"),
                agent_commission=Decimal("1.00"),
                profit=Decimal("-0.25"),
                created_at=now - timedelta(days=1),
            ),
            Sale(
                id="sale-rival",
                terminal_id="terminal-rival",
                voucher_type="Ringa",
                ref_number="REF-003",
                amount=Decimal("20.00"),
                supplier_commission_pct=Decimal("2.00"),
                retailer_commission=Decimal("1.00"),
                agent_commission=Decimal("0.00"),
                profit=Decimal("0.40"),
                created_at=now - timedelta(days=2),
            ),
        ]
    )
    db_session.commit()
    return SimpleNamespace(
        corner_id=corner.id,
        rival_id=rival.id,
        till_with_sales="terminal-till-1",
        till_without_sales="terminal-till-2",
        rival_terminal="terminal-rival",
    )


@pytest.fixture()
def client(db_session: Session) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def login(client: TestClient) -> Callable[[str], dict[str, str]]:
    def _login(email: str) -> dict[str, str]:
        response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture()
def retailer_headers(portal: SimpleNamespace, login: Callable[[str], dict[str, str]]) -> dict[str, str]:
    return login("retailer@example.com")
