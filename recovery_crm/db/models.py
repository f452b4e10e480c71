"""SQLAlchemy ORM models for users, cases, leads, calls and finance records."""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, ForeignKey, Index, Integer, Numeric,
    String, Text, UniqueConstraint, Uuid, event, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recovery_crm.db.base import Base
from recovery_crm.db.enums import (
    DEFAULT_CASE_PRIORITY, DEFAULT_CASE_STATUS, DEFAULT_ROLE,
    CasePaymentStatus, FollowupStatus, OfferCaseStatus, OfferPaymentStatus,
    PaymentStatus, RequestStatus,
)
from recovery_crm.utils.time_windows import utcnow


def _money():
    return Numeric(12, 2, asdecimal=False)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


# =============================================================================
# Users & Attendance
# =============================================================================

class User(TimestampMixin, Base):
    """
    Application user.

    Authenticates with username/email and a bcrypt password hash.
    assigned_cases and last_assignment_at are maintained by case assignment.
    """
    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_role", "role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_ROLE.value, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    assigned_cases: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_assignment_at: Mapped[datetime | None] = mapped_column(nullable=True)

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.username


class AttendanceLog(TimestampMixin, Base):
    """One row per login; logout stamps the latest open row."""
    __tablename__ = "attendance_logs"
    __table_args__ = (
        Index("idx_attendance_user_login", "user_id", "login_time"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    login_time: Mapped[datetime] = mapped_column(nullable=False)
    logout_time: Mapped[datetime | None] = mapped_column(nullable=True)
    log_date: Mapped[str] = mapped_column(String(10), nullable=False)  # YYYY-MM-DD

    user: Mapped["User"] = relationship()


# =============================================================================
# Leads & Calls
# =============================================================================

class Followup(TimestampMixin, Base):
    """A pre-conversion lead worked by a telecaller."""
    __tablename__ = "followups"
    __table_args__ = (
        Index("idx_followups_created", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    time: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    response: Mapped[str] = mapped_column(Text, default="", nullable=False)
    issue_type: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    village: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    status: Mapped[str] = mapped_column(
        String(30), default=FollowupStatus.PENDING.value, nullable=False
    )
    callback_time: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )


class CallLog(TimestampMixin, Base):
    """Append-only record of a call attempt. customer is a name, not a reference."""
    __tablename__ = "call_logs"
    __table_args__ = (
        Index("idx_call_logs_created", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    time: Mapped[str] = mapped_column(String(50), nullable=False)
    customer: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    duration: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    response: Mapped[str] = mapped_column(Text, default="", nullable=False)
    callback_time: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )


# =============================================================================
# Customers (cases)
# =============================================================================

class Customer(TimestampMixin, Base):
    """
    A loan-recovery case, from conversion to resolution.

    This is the single source of truth for cases; /api/cases is a
    projection of this table.

    Invariants:
    - case_number/case_id are unique (storage-enforced)
    - assigned_to is NULL until an agent is assigned
    - status changes go through core.case_status.ensure_transition
    """
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("case_number", name="uq_customer_case_number"),
        UniqueConstraint("case_id", name="uq_customer_case_id"),
        CheckConstraint("cibil IS NULL OR cibil BETWEEN 300 AND 900", name="ck_customer_cibil"),
        CheckConstraint(
            "cibil_before IS NULL OR cibil_before BETWEEN 300 AND 900",
            name="ck_customer_cibil_before",
        ),
        CheckConstraint(
            "cibil_after IS NULL OR cibil_after BETWEEN 300 AND 900",
            name="ck_customer_cibil_after",
        ),
        Index("idx_customers_status", "status"),
        Index("idx_customers_assigned_to", "assigned_to"),
        Index("idx_customers_created", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_number: Mapped[int] = mapped_column(Integer, nullable=False)
    case_id: Mapped[str] = mapped_column(String(20), nullable=False)

    # Contact / identity
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(10), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    aadhaar: Mapped[str | None] = mapped_column(String(12), nullable=True)
    pan: Mapped[str | None] = mapped_column(String(10), nullable=True)
    cibil: Mapped[int | None] = mapped_column(Integer, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Loan problem
    problem: Mapped[str] = mapped_column(Text, nullable=False)
    bank: Mapped[str | None] = mapped_column(String(255), nullable=True)
    other_bank: Mapped[str | None] = mapped_column(String(255), nullable=True)
    loan_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(18), nullable=True)
    issues: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Source
    page_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    referred_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    telecaller_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    telecaller_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    converted_from_lead_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("followups.id", ondelete="SET NULL"), nullable=True
    )

    # Workflow
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_CASE_STATUS.value, nullable=False
    )
    priority: Mapped[str] = mapped_column(
        String(10), default=DEFAULT_CASE_PRIORITY.value, nullable=False
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    assigned_date: Mapped[datetime | None] = mapped_column(nullable=True)
    resolved_date: Mapped[datetime | None] = mapped_column(nullable=True)
    amount: Mapped[float | None] = mapped_column(_money(), nullable=True)

    # Case-level fee collection
    total_amount: Mapped[float | None] = mapped_column(_money(), nullable=True)
    advance_amount: Mapped[float | None] = mapped_column(_money(), nullable=True)
    payment_status: Mapped[str] = mapped_column(
        String(20), default=CasePaymentStatus.PENDING.value, nullable=False
    )

    # Outcome
    cibil_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cibil_after: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Embedded lists/maps (replaced wholesale on change, never mutated in place)
    documents: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    notes: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    call_history: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Relationships
    assignee: Mapped["User | None"] = relationship(foreign_keys=[assigned_to])
    telecaller: Mapped["User | None"] = relationship(foreign_keys=[telecaller_id])
    offer: Mapped["Offer | None"] = relationship(
        back_populates="customer",
        cascade="all, delete-orphan",
        uselist=False,
    )
    requests: Mapped[list["CaseRequest"]] = relationship(
        back_populates="customer",
        cascade="all, delete-orphan",
    )


class CaseRequest(TimestampMixin, Base):
    """A question or request from the assigned agent to admins about a case."""
    __tablename__ = "case_requests"
    __table_args__ = (
        Index("idx_case_requests_customer", "customer_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    agent_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    agent_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=RequestStatus.PENDING.value, nullable=False
    )
    admin_response: Mapped[str | None] = mapped_column(Text, nullable=True)

    customer: Mapped["Customer"] = relationship(back_populates="requests")
    agent: Mapped["User | None"] = relationship()


# =============================================================================
# Finance
# =============================================================================

class Offer(TimestampMixin, Base):
    """
    Negotiated settlement for a case, brokered by its agent.

    One offer per case (uq_offer_customer). pending_amount is derived
    from deal_amount - advance_paid on every insert and update.
    """
    __tablename__ = "offers"
    __table_args__ = (
        UniqueConstraint("customer_id", name="uq_offer_customer"),
        CheckConstraint("deal_amount >= 0", name="ck_offer_deal_amount"),
        CheckConstraint("advance_paid >= 0", name="ck_offer_advance_paid"),
        Index("idx_offers_agent", "agent_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    deal_amount: Mapped[float] = mapped_column(_money(), nullable=False)
    advance_paid: Mapped[float] = mapped_column(_money(), default=0, nullable=False)
    pending_amount: Mapped[float] = mapped_column(_money(), default=0, nullable=False)
    case_status: Mapped[str] = mapped_column(
        String(20), default=OfferCaseStatus.IN_PROGRESS.value, nullable=False
    )
    payment_status: Mapped[str] = mapped_column(
        String(20), default=OfferPaymentStatus.PENDING.value, nullable=False
    )
    payment_proof_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    customer: Mapped["Customer"] = relationship(back_populates="offer")
    agent: Mapped["User"] = relationship()


@event.listens_for(Offer, "before_insert")
@event.listens_for(Offer, "before_update")
def _recompute_pending_amount(mapper, connection, target: Offer) -> None:
    deal = float(target.deal_amount or 0)
    advance = float(target.advance_paid or 0)
    target.pending_amount = round(deal - advance, 2)


class Payment(TimestampMixin, Base):
    """Payment received; customer and case_id are free text, not references."""
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_payment_amount"),
        Index("idx_payments_date", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer: Mapped[str] = mapped_column(String(255), nullable=False)
    case_id: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[float] = mapped_column(_money(), nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    method: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PaymentStatus.PENDING.value, nullable=False
    )
    proof: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )


class Expense(TimestampMixin, Base):
    __tablename__ = "expenses"
    __table_args__ = (
        Index("idx_expenses_user", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[float] = mapped_column(_money(), nullable=False)
    advance: Mapped[float] = mapped_column(_money(), default=0, nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)


# =============================================================================
# Partners & Field Visits
# =============================================================================

class Referral(TimestampMixin, Base):
    __tablename__ = "referrals"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    cases: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    success_rate: Mapped[str] = mapped_column(String(20), default="0%", nullable=False)
    commission: Mapped[str] = mapped_column(String(50), default="₹0", nullable=False)


class FieldData(TimestampMixin, Base):
    """A marketing field visit to a bank/NBFC/showroom manager."""
    __tablename__ = "field_data"
    __table_args__ = (
        Index("idx_field_data_created_by", "created_by"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bank_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bank_area: Mapped[str | None] = mapped_column(String(255), nullable=True)
    manager_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    manager_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    manager_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    executive_code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    collection_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
