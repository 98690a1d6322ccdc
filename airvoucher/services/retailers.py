"""Read-side queries for retailer profiles, terminals and sales."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import exists, select
from sqlalchemy.orm import Session, selectinload

from airvoucher.models import Retailer, Sale, Terminal, UserRole
from airvoucher.services.sales_table import SaleRecord


class RetailerNotFoundError(LookupError):
    """Raised when the signed-in user has no retailer profile."""


@dataclass(slots=True, frozen=True)
class TerminalWithSales:
    """A terminal together with whether any sale references it."""

    terminal: Terminal
    has_sales: bool


def fetch_my_retailer(session: Session, *, user_id: str) -> Retailer:
    statement = (
        select(Retailer)
        .where(Retailer.user_profile_id == user_id)
        .order_by(Retailer.created_at, Retailer.id)
        .limit(1)
    )
    retailer = session.scalars(statement).first()
    if retailer is None:
        raise RetailerNotFoundError(f"No retailer profile for user '{user_id}'")
    return retailer


def terminal_has_sales(session: Session, *, terminal_id: str) -> bool:
    return bool(session.scalar(select(exists().where(Sale.terminal_id == terminal_id))))


def fetch_terminals(
    session: Session, *, retailer_id: str, search: str | None = None
) -> list[TerminalWithSales]:
    """Terminals for a retailer ordered by name, optionally narrowed by a name search."""
    has_sales = exists().where(Sale.terminal_id == Terminal.id).correlate(Terminal)
    statement = (
        select(Terminal, has_sales.label("has_sales"))
        .where(Terminal.retailer_id == retailer_id)
        .options(selectinload(Terminal.user_profile))
        .order_by(Terminal.name, Terminal.id)
    )
    rows = session.execute(statement).all()
    listings = [TerminalWithSales(terminal=row[0], has_sales=bool(row[1])) for row in rows]
    if search:
        term = search.lower()
        listings = [item for item in listings if term in item.terminal.name.lower()]
    return listings


def fetch_sales(
    session: Session,
    *,
    user_id: str,
    role: UserRole | str,
    since: datetime | None = None,
) -> list[SaleRecord]:
    """Sales visible to the user, newest first.

    Admins see every sale. Retailers see sales from terminals they own and
    agents see sales from the retailers assigned to them. Any other role
    sees nothing.
    """
    role = UserRole(role)
    statement = (
        select(Sale, Terminal.name, Retailer.name)
        .join(Terminal, Sale.terminal_id == Terminal.id)
        .join(Retailer, Terminal.retailer_id == Retailer.id)
        .order_by(Sale.created_at.desc(), Sale.id)
    )
    if role is UserRole.RETAILER:
        statement = statement.where(Retailer.user_profile_id == user_id)
    elif role is UserRole.AGENT:
        statement = statement.where(Retailer.agent_profile_id == user_id)
    elif role is not UserRole.ADMIN:
        return []
    if since is not None:
        statement = statement.where(Sale.created_at >= since)

    records: list[SaleRecord] = []
    for sale, terminal_name, retailer_name in session.execute(statement).all():
        records.append(
            SaleRecord(
                id=sale.id,
                created_at=sale.created_at.isoformat(),
                voucher_type=sale.voucher_type,
                retailer_name=retailer_name,
                terminal_name=terminal_name,
                ref_number=sale.ref_number,
                amount=Decimal(sale.amount),
                supplier_commission_pct=Decimal(sale.supplier_commission_pct or 0),
                retailer_commission=Decimal(sale.retailer_commission or 0),
                agent_commission=Decimal(sale.agent_commission or 0),
                profit=Decimal(sale.profit or 0),
            )
        )
    return records


__all__ = [
    "RetailerNotFoundError",
    "TerminalWithSales",
    "fetch_my_retailer",
    "fetch_sales",
    "fetch_terminals",
    "terminal_has_sales",
]
