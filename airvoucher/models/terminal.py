"""Terminal ORM model."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from airvoucher.models.base import Base, TimestampMixin


class TerminalStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Terminal(TimestampMixin, Base):
    """Point-of-sale account registered under a retailer."""

    __tablename__ = "terminals"
    __table_args__ = (
        Index("ix_terminals_retailer_id", "retailer_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    retailer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("retailers.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[TerminalStatus] = mapped_column(
        Enum(TerminalStatus, name="terminal_status"), nullable=False, default=TerminalStatus.ACTIVE
    )
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    user_profile_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True
    )

    retailer = relationship("Retailer", back_populates="terminals")
    user_profile = relationship("User")
    sales = relationship("Sale", back_populates="terminal", passive_deletes="all")


__all__ = ["Terminal", "TerminalStatus"]
