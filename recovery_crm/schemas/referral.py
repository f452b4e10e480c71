"""Pydantic schemas for referral partners."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ReferralCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=20)
    cases: int = Field(0, ge=0)
    success_rate: str = "0%"
    commission: str = "₹0"


class ReferralRead(BaseModel):
    id: UUID
    name: str
    phone: str
    cases: int
    success_rate: str
    commission: str
    created_at: datetime

    model_config = {"from_attributes": True}
