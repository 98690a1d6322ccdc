"""Pydantic schemas for retailer resources."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from airvoucher.models import RetailerStatus


class RetailerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    status: RetailerStatus
    commission_balance: Decimal


class NavItem(BaseModel):
    name: str
    href: str
    icon: str
    active: bool = False


class NavigationResponse(BaseModel):
    title: str
    role: str
    items: list[NavItem]


__all__ = ["NavItem", "NavigationResponse", "RetailerRead"]
