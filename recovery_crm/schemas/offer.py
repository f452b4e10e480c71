"""Pydantic schemas for offers."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from recovery_crm.db.enums import OfferCaseStatus, OfferPaymentStatus


class OfferCreate(BaseModel):
    customer_id: UUID
    agent_id: UUID
    deal_amount: float = Field(..., ge=0)
    advance_paid: float = Field(0, ge=0)
    case_status: OfferCaseStatus = OfferCaseStatus.IN_PROGRESS
    payment_status: OfferPaymentStatus = OfferPaymentStatus.PENDING
    notes: str | None = Field(None, max_length=500)


class OfferUpdate(BaseModel):
    """Partial update, scoped to the owning agent."""
    agent_id: UUID
    deal_amount: float | None = Field(None, ge=0)
    advance_paid: float | None = Field(None, ge=0)
    case_status: OfferCaseStatus | None = None
    payment_status: OfferPaymentStatus | None = None
    notes: str | None = Field(None, max_length=500)


class OfferRead(BaseModel):
    id: UUID
    customer_id: UUID
    case_id: str | None = None
    customer_name: str | None = None
    problem: str | None = None
    agent_id: UUID
    deal_amount: float
    advance_paid: float
    pending_amount: float
    case_status: OfferCaseStatus
    payment_status: OfferPaymentStatus
    payment_proof_url: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime


class OfferStats(BaseModel):
    total_offers: int
    total_deal_value: float
    success_rate: int
