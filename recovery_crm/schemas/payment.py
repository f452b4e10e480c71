"""Pydantic schemas for payments."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from recovery_crm.db.enums import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    customer: str = Field(..., min_length=1, max_length=255)
    case_id: str = Field(..., min_length=1, max_length=50)
    amount: float = Field(..., ge=0)
    date: datetime
    method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    created_by: UUID | None = None


class PaymentUpdate(BaseModel):
    customer: str | None = Field(None, min_length=1, max_length=255)
    case_id: str | None = Field(None, min_length=1, max_length=50)
    amount: float | None = Field(None, ge=0)
    date: datetime | None = None
    method: PaymentMethod | None = None
    status: PaymentStatus | None = None


class PaymentRead(BaseModel):
    id: UUID
    customer: str
    case_id: str
    amount: float
    date: datetime
    method: PaymentMethod
    status: PaymentStatus
    proof: str | None
    created_by: UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}
