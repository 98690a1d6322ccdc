"""Pydantic schemas for terminal resources."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from airvoucher.models import TerminalStatus


class TerminalCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    retailer_id: str = Field(..., alias="retailerId", min_length=1, max_length=36)
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class TerminalStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    terminal_id: str = Field(..., alias="terminalId", min_length=1, max_length=36)
    status: TerminalStatus


class TerminalDeleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    terminal_id: str = Field(..., alias="terminalId", min_length=1, max_length=36)


class TerminalRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    status: TerminalStatus
    last_active: datetime | None = None


class TerminalEnvelope(BaseModel):
    terminal: TerminalRead


class TerminalDeleted(BaseModel):
    deleted: str


class TerminalContact(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    full_name: str | None = None
    email: str


class TerminalListing(TerminalRead):
    has_sales: bool = False
    user_profile: TerminalContact | None = None


__all__ = [
    "TerminalContact",
    "TerminalCreateRequest",
    "TerminalDeleteRequest",
    "TerminalDeleted",
    "TerminalEnvelope",
    "TerminalListing",
    "TerminalRead",
    "TerminalStatusRequest",
]
