"""Seed script for demo users, a retailer, terminals and a few sales."""
from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from airvoucher.api.routes.auth import hash_password
from airvoucher.core.logging import configure_logging
from airvoucher.db.session import SessionLocal, engine
from airvoucher.models import Base, Retailer, Sale, Terminal, User, UserRole, UserStatus

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "changeme"

_DEMO_USERS = [
    ("admin@demo.local", "Demo Admin", UserRole.ADMIN),
    ("agent@demo.local", "Demo Agent", UserRole.AGENT),
    ("retailer@demo.local", "Demo Retailer", UserRole.RETAILER),
]

_DEMO_SALES = [
    ("Mobile", Decimal("50.00"), Decimal("3.00"), Decimal("2.50"), Decimal("0.50"), Decimal("0.00")),
    ("OTT", Decimal("100.00"), Decimal("5.00"), Decimal("3.00"), Decimal("1.00"), Decimal("1.00")),
    ("Hollywoodbets", Decimal("200.00"), Decimal("4.00"), Decimal("5.00"), Decimal("2.00"), Decimal("1.00")),
    ("Ringa", Decimal("30.00"), Decimal("2.00"), Decimal("1.00"), Decimal("0.20"), Decimal("-0.60")),
]


def seed(session: Session) -> None:
    """Create the demo accounts once. Re-running is a no-op."""

    users: dict[UserRole, User] = {}
    for email, full_name, role in _DEMO_USERS:
        user = session.scalars(select(User).where(User.email == email)).one_or_none()
        if user is None:
            user = User(
                email=email,
                full_name=full_name,
                role=role,
                status=UserStatus.ACTIVE,
                hashed_password=hash_password(DEMO_PASSWORD),
            )
            session.add(user)
            logger.info("Added user %s", email)
        else:
            logger.info("User %s already exists", email)
        users[role] = user
    session.flush()

    owner = users[UserRole.RETAILER]
    retailer = session.scalars(
        select(Retailer).where(Retailer.user_profile_id == owner.id)
    ).one_or_none()
    if retailer is not None:
        logger.info("Retailer %s already exists", retailer.name)
        return

    retailer = Retailer(
        name="Demo Spaza",
        user_profile_id=owner.id,
        agent_profile_id=users[UserRole.AGENT].id,
        commission_balance=Decimal("0"),
    )
    session.add(retailer)
    session.flush()

    counter = Terminal(retailer_id=retailer.id, name="Front Counter")
    spare = Terminal(retailer_id=retailer.id, name="Back Office")
    session.add_all([counter, spare])
    session.flush()

    for index, (voucher_type, amount, pct, retailer_cut, agent_cut, profit) in enumerate(_DEMO_SALES, start=1):
        session.add(
            Sale(
                terminal_id=counter.id,
                voucher_type=voucher_type,
                ref_number=f"DEMO-{index:04d}",
                amount=amount,
                supplier_commission_pct=pct,
                retailer_commission=retailer_cut,
                agent_commission=agent_cut,
                profit=profit,
            )
        )
        retailer.commission_balance += retailer_cut
    logger.info("Created retailer %s with %s sales", retailer.name, len(_DEMO_SALES))


def main() -> None:
    configure_logging()
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed(session)
        session.commit()


if __name__ == "__main__":
    main()
