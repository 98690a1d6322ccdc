"""Retailer ORM model."""
from __future__ import annotations

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from airvoucher.models.base import Base, TimestampMixin


class RetailerStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


class Retailer(TimestampMixin, Base):
    """Business that owns terminals and earns commission on their sales."""

    __tablename__ = "retailers"
    __table_args__ = (
        Index("ix_retailers_user_profile_id", "user_profile_id"),
        Index("ix_retailers_agent_profile_id", "agent_profile_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False
    )
    agent_profile_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[RetailerStatus] = mapped_column(
        Enum(RetailerStatus, name="retailer_status"), nullable=False, default=RetailerStatus.ACTIVE
    )
    commission_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    owner = relationship("User", back_populates="retailers", foreign_keys=[user_profile_id])
    agent = relationship("User", foreign_keys=[agent_profile_id])
    terminals = relationship("Terminal", back_populates="retailer", cascade="all, delete-orphan")


__all__ = ["Retailer", "RetailerStatus"]
