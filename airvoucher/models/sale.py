"""Sale ORM model."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from airvoucher.models.base import Base, TimestampMixin


class Sale(TimestampMixin, Base):
    """Completed voucher sale. Written by the sale processor, read-only here."""

    __tablename__ = "sales"
    __table_args__ = (
        Index("ix_sales_terminal_id", "terminal_id"),
        Index("ix_sales_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    terminal_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("terminals.id", ondelete="RESTRICT"), nullable=False
    )
    voucher_type: Mapped[str | None] = mapped_column(String(64))
    ref_number: Mapped[str | None] = mapped_column(String(64))
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    supplier_commission_pct: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=0)
    retailer_commission: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    agent_commission: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    profit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    terminal = relationship("Terminal", back_populates="sales")


__all__ = ["Sale"]
