"""Pydantic schemas for customers (cases)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from recovery_crm.db.enums import CallOutcome, CasePaymentStatus, CasePriority, CaseStatus, LoanType
from recovery_crm.schemas.user import UserSummary
from recovery_crm.utils.normalization import (
    normalize_aadhaar,
    normalize_account_number,
    normalize_email,
    normalize_pan,
    normalize_phone,
)


CIBIL_MIN = 300
CIBIL_MAX = 900


class _CustomerFields(BaseModel):
    @field_validator("phone", check_fields=False)
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if v is None or v.strip() == "":
            return None
        return normalize_phone(v)  # Raises ValueError on invalid

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def blank_email(cls, v):
        if isinstance(v, str):
            return normalize_email(v)
        return v

    @field_validator("pan", check_fields=False)
    @classmethod
    def validate_pan(cls, v: str | None) -> str | None:
        return normalize_pan(v)

    @field_validator("aadhaar", check_fields=False)
    @classmethod
    def validate_aadhaar(cls, v: str | None) -> str | None:
        return normalize_aadhaar(v)

    @field_validator("account_number", check_fields=False)
    @classmethod
    def validate_account_number(cls, v: str | None) -> str | None:
        return normalize_account_number(v)

    @field_validator("issues", mode="before", check_fields=False)
    @classmethod
    def split_issues(cls, v):
        """Accept a list, a comma-separated string, or repeated form fields of either."""
        if v is None:
            return v
        if isinstance(v, str):
            v = [v]
        parts = [part for item in v for part in str(item).split(",")]
        return [part.strip() for part in parts if part.strip()]


class CustomerCreate(_CustomerFields):
    """Request schema for creating a customer (case)."""

    # Contact (required)
    name: str = Field(..., min_length=1, max_length=255)
    phone: str

    # Contact (optional)
    email: EmailStr | None = None
    aadhaar: str | None = None
    pan: str | None = None
    cibil: int | None = Field(None, ge=CIBIL_MIN, le=CIBIL_MAX)
    address: str | None = None

    # Loan problem
    problem: str = Field(..., min_length=1)
    bank: str | None = Field(None, max_length=255)
    other_bank: str | None = Field(None, max_length=255)
    loan_type: LoanType | None = None
    account_number: str | None = None
    issues: list[str] = Field(default_factory=list)

    # Source
    page_number: int | None = Field(None, ge=1)
    referred_person: str | None = Field(None, max_length=255)
    telecaller_id: UUID | None = None
    telecaller_name: str | None = Field(None, max_length=255)
    converted_from_lead_id: UUID | None = None

    priority: CasePriority = CasePriority.MEDIUM

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if v.strip() == "":
            raise ValueError("Phone number is required")
        return normalize_phone(v)

    @field_validator("name", "problem")
    @classmethod
    def strip_required(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class CustomerUpdate(_CustomerFields):
    """Request schema for updating a customer (partial)."""

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = None
    email: EmailStr | None = None
    aadhaar: str | None = None
    pan: str | None = None
    cibil: int | None = Field(None, ge=CIBIL_MIN, le=CIBIL_MAX)
    address: str | None = None
    problem: str | None = Field(None, min_length=1)
    bank: str | None = Field(None, max_length=255)
    other_bank: str | None = Field(None, max_length=255)
    loan_type: LoanType | None = None
    account_number: str | None = None
    issues: list[str] | None = None
    page_number: int | None = Field(None, ge=1)
    referred_person: str | None = Field(None, max_length=255)
    priority: CasePriority | None = None
    status: CaseStatus | None = None
    cibil_before: int | None = Field(None, ge=CIBIL_MIN, le=CIBIL_MAX)
    cibil_after: int | None = Field(None, ge=CIBIL_MIN, le=CIBIL_MAX)


class NoteRead(BaseModel):
    content: str
    added_by: str | None = None
    added_at: datetime | None = None


class CallHistoryEntry(BaseModel):
    response: str
    status: str
    next_call_date: str | None = None
    timestamp: datetime


class CustomerRead(BaseModel):
    """Response schema for a single customer (case)."""

    id: UUID
    case_id: str
    name: str
    phone: str
    email: str | None
    aadhaar: str | None
    pan: str | None
    cibil: int | None
    address: str | None
    problem: str
    bank: str | None
    other_bank: str | None
    loan_type: str | None
    account_number: str | None
    issues: list[str]
    page_number: int | None
    referred_person: str | None
    telecaller_id: UUID | None
    telecaller_name: str | None
    converted_from_lead_id: UUID | None
    status: CaseStatus
    priority: CasePriority
    assigned_to: UUID | None
    assigned_to_name: str | None = None
    assigned_date: datetime | None
    resolved_date: datetime | None
    amount: float | None
    total_amount: float | None
    advance_amount: float | None
    payment_status: CasePaymentStatus
    cibil_before: int | None
    cibil_after: int | None
    documents: dict[str, str]
    notes: list[NoteRead]
    call_history: list[CallHistoryEntry]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CustomerAssign(BaseModel):
    """Assign a case to an agent. Validation happens in the service."""
    agent_id: str | None = None
    amount: float | None = None


class CustomerComplete(BaseModel):
    """Close a case. Both scores are checked in the service."""
    cibil_before: int | None = None
    cibil_after: int | None = None


class CustomerStatusChange(BaseModel):
    status: str = Field(..., min_length=1)
    added_by: str | None = Field(None, max_length=255)


class CallEntryCreate(BaseModel):
    response: str = Field(..., min_length=1)
    status: CallOutcome = CallOutcome.PENDING
    next_call_date: str | None = None

    @field_validator("response")
    @classmethod
    def strip_response(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Call response is required")
        return cleaned


class CallHistoryResponse(BaseModel):
    call_history: list[CallHistoryEntry]


class CustomerPayment(BaseModel):
    total_amount: float | None = Field(None, ge=0)
    advance_amount: float | None = Field(None, ge=0)


class PaymentProofUploaded(BaseModel):
    message: str
    file: str
    customer: CustomerRead


class AssignResponse(BaseModel):
    message: str
    customer: CustomerRead
    agent: UserSummary
