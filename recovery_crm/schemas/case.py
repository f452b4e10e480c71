"""Pydantic schemas for the case view (a projection of customers)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from recovery_crm.db.enums import CaseStatus


class CaseCustomer(BaseModel):
    """Customer fields shown alongside a case."""
    name: str
    phone: str
    email: str | None = None
    aadhaar: str | None = None
    pan: str | None = None
    cibil: int | None = None
    address: str | None = None
    bank: str | None = None
    loan_type: str | None = None
    account_number: str | None = None
    issues: list[str] = []
    referred_person: str | None = None


class CaseRead(BaseModel):
    id: UUID
    case_id: str
    customer: CaseCustomer
    problem: str
    assigned_date: datetime | None
    status: CaseStatus
    officer_id: UUID | None
    officer: str | None
    amount: float | None
    documents: dict[str, str]
    cibil_before: int | None
    cibil_after: int | None
    resolved_date: datetime | None
    created_at: datetime


class CaseUpdate(BaseModel):
    """Partial update of a case; status goes through the transition guard."""
    officer_id: UUID | None = None
    status: str | None = None
    cibil_before: int | None = Field(None, ge=300, le=900)
    cibil_after: int | None = Field(None, ge=300, le=900)
