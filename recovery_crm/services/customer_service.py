"""Customer service - case creation, workflow transitions, call history, payments."""

import logging
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from recovery_crm.core.case_status import InvalidTransitionError, ensure_transition
from recovery_crm.db.enums import CasePaymentStatus, CaseStatus, DocumentField
from recovery_crm.db.models import Customer, User
from recovery_crm.schemas.customer import (
    CIBIL_MAX,
    CIBIL_MIN,
    CallEntryCreate,
    CustomerCreate,
    CustomerUpdate,
)
from recovery_crm.services import user_service
from recovery_crm.utils.money import format_inr
from recovery_crm.utils.normalization import escape_like_string, normalize_search_text
from recovery_crm.utils.time_windows import utcnow


logger = logging.getLogger(__name__)

CASE_ID_PREFIX = "CASE-"
CASE_ID_ATTEMPTS = 3
DEFAULT_NOTE_AUTHOR = "Admin"
NON_NULLABLE_FIELDS = {"name", "phone", "problem", "priority", "issues"}


class CustomerServiceError(Exception):
    """Base exception for customer service errors."""
    pass


class CustomerNotFoundError(CustomerServiceError):
    """Customer (case) not found."""
    pass


class CaseIdConflictError(CustomerServiceError):
    """Case id stayed taken across every retry."""
    pass


class InvalidAssignmentError(CustomerServiceError):
    """Bad agent id, non-agent user or non-positive amount."""
    pass


class CaseAlreadyAssignedError(CustomerServiceError):
    """Case already has an agent."""
    pass


class CompletionError(CustomerServiceError):
    """Missing or out-of-range CIBIL scores."""
    pass


class StatusChangeError(CustomerServiceError):
    """Status change rejected by the transition guard."""
    pass


class CustomerValidationError(CustomerServiceError):
    pass


# =============================================================================
# Case IDs
# =============================================================================

def format_case_id(case_number: int) -> str:
    """CASE- plus the number padded to at least four digits."""
    return f"{CASE_ID_PREFIX}{case_number:04d}"


def next_case_number(db: Session) -> int:
    """Next case number: max existing + 1, starting at 1."""
    max_num = db.query(func.max(Customer.case_number)).scalar()
    return (max_num or 0) + 1


def _is_case_id_conflict(error: IntegrityError) -> bool:
    constraint_name = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint_name in ("uq_customer_case_number", "uq_customer_case_id"):
        return True
    message = str(error.orig) if error.orig else str(error)
    return any(
        marker in message
        for marker in (
            "uq_customer_case_number",
            "uq_customer_case_id",
            "customers.case_number",
            "customers.case_id",
        )
    )


# =============================================================================
# Notes
# =============================================================================

def _note(content: str, added_by: str | None = None) -> dict:
    return {
        "content": content,
        "added_by": added_by or DEFAULT_NOTE_AUTHOR,
        "added_at": utcnow().isoformat(),
    }


def _append_note(customer: Customer, content: str, added_by: str | None = None) -> None:
    # JSON columns only track reassignment
    customer.notes = [*(customer.notes or []), _note(content, added_by)]


def apply_status(customer: Customer, target: CaseStatus) -> bool:
    """Apply a guarded status change. Returns False for a same-state no-op."""
    try:
        changed = ensure_transition(customer.status, target.value)
    except InvalidTransitionError as exc:
        raise StatusChangeError(str(exc)) from exc
    if changed:
        customer.status = target.value
        if target == CaseStatus.SOLVED:
            customer.resolved_date = utcnow()
    return changed


# =============================================================================
# CRUD
# =============================================================================

def get_customer(db: Session, customer_id: UUID) -> Customer | None:
    return (
        db.query(Customer)
        .options(joinedload(Customer.assignee))
        .filter(Customer.id == customer_id)
        .first()
    )


def get_customer_by_case_id(db: Session, case_id: str) -> Customer | None:
    return db.query(Customer).filter(Customer.case_id == case_id.strip().upper()).first()


def list_customers(
    db: Session,
    status: CaseStatus | None = None,
    assigned_to: UUID | None = None,
    q: str | None = None,
) -> list[Customer]:
    """List customers newest first."""
    query = db.query(Customer).options(joinedload(Customer.assignee))
    if status:
        query = query.filter(Customer.status == status.value)
    if assigned_to:
        query = query.filter(Customer.assigned_to == assigned_to)

    search = normalize_search_text(q)
    if search:
        pattern = f"%{escape_like_string(search)}%"
        query = query.filter(
            or_(
                Customer.name.ilike(pattern, escape="\\"),
                Customer.phone.ilike(pattern, escape="\\"),
                Customer.case_id.ilike(pattern, escape="\\"),
            )
        )
    return query.order_by(Customer.created_at.desc(), Customer.case_number.desc()).all()


def list_assigned(db: Session, user_id: UUID) -> list[Customer]:
    return (
        db.query(Customer)
        .filter(Customer.assigned_to == user_id)
        .order_by(Customer.assigned_date.desc())
        .all()
    )


def create_customer(
    db: Session,
    data: CustomerCreate,
    documents: dict[str, str] | None = None,
) -> Customer:
    """
    Create a customer with the next sequential case id.

    The unique constraints on case_number/case_id decide races; a conflict
    is retried with a fresh number up to CASE_ID_ATTEMPTS times.

    Raises:
        CustomerValidationError: Unknown telecaller
        CaseIdConflictError: Every attempt collided
    """
    if data.telecaller_id and not user_service.get_user(db, data.telecaller_id):
        raise CustomerValidationError("Telecaller not found")

    bank = data.bank
    if bank == "other" and data.other_bank:
        bank = data.other_bank

    for attempt in range(CASE_ID_ATTEMPTS):
        case_number = next_case_number(db)
        customer = Customer(
            case_number=case_number,
            case_id=format_case_id(case_number),
            name=data.name,
            phone=data.phone,  # Already normalized by schema
            email=data.email,
            aadhaar=data.aadhaar,
            pan=data.pan,
            cibil=data.cibil,
            address=data.address,
            problem=data.problem,
            bank=bank,
            other_bank=data.other_bank,
            loan_type=data.loan_type.value if data.loan_type else None,
            account_number=data.account_number,
            issues=list(data.issues),
            page_number=data.page_number,
            referred_person=data.referred_person,
            telecaller_id=data.telecaller_id,
            telecaller_name=data.telecaller_name,
            converted_from_lead_id=data.converted_from_lead_id,
            priority=data.priority.value,
            status=CaseStatus.PENDING.value,
            documents=dict(documents or {}),
            notes=[],
            call_history=[],
        )
        db.add(customer)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if customer in db:
                db.expunge(customer)
            if not _is_case_id_conflict(exc):
                raise
            logger.warning("Case id conflict on attempt %s", attempt + 1)
            continue
        db.refresh(customer)
        logger.info("Created customer %s (%s)", customer.id, customer.case_id)
        return customer

    raise CaseIdConflictError("Case ID conflict, please retry")


def update_customer(db: Session, customer: Customer, data: CustomerUpdate) -> Customer:
    """
    Partial update. A status change goes through the transition guard.

    bank == "other" with other_bank set stores other_bank as the bank.
    """
    updates = data.model_dump(exclude_unset=True, mode="json")
    if updates.get("bank") == "other" and updates.get("other_bank"):
        updates["bank"] = updates["other_bank"]

    status = updates.pop("status", None)
    if status:
        apply_status(customer, CaseStatus(status))

    for field, value in updates.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(db: Session, customer: Customer) -> list[str]:
    """
    Delete a customer with its offer and requests.

    Returns:
        Stored document filenames, for the caller to remove from disk
    """
    customer_id = customer.id
    filenames = [name for name in (customer.documents or {}).values() if name]
    db.delete(customer)
    db.commit()
    logger.info("Deleted customer %s", customer_id)
    return filenames


# =============================================================================
# Workflow
# =============================================================================

def _apply_assignment(
    customer: Customer,
    agent: User,
    amount: float | None = None,
    added_by: str | None = None,
) -> None:
    """Point the case at agent, move it to In Progress and bump the agent's counters."""
    if customer.status == CaseStatus.SOLVED.value:
        raise StatusChangeError("Cannot assign a solved case")

    apply_status(customer, CaseStatus.IN_PROGRESS)
    now = utcnow()
    customer.assigned_to = agent.id
    customer.assigned_date = now
    note = f"Case assigned to agent: {agent.display_name}"
    if amount is not None:
        customer.amount = float(amount)
        note = f"{note} with amount: {format_inr(amount)}"
    _append_note(customer, note, added_by)

    agent.assigned_cases = (agent.assigned_cases or 0) + 1
    agent.last_assignment_at = now


def _release_assignment(db: Session, customer: Customer) -> None:
    previous = user_service.get_user(db, customer.assigned_to) if customer.assigned_to else None
    if previous:
        previous.assigned_cases = max((previous.assigned_cases or 0) - 1, 0)
    customer.assigned_to = None


def assign_customer(
    db: Session,
    customer: Customer,
    agent_id: str | None,
    amount: float | None,
    added_by: str | None = None,
) -> tuple[Customer, User]:
    """
    Assign a case to an agent.

    The case update and the agent's counters commit together.

    Raises:
        InvalidAssignmentError: Bad agent id, non-agent user, amount <= 0
        CaseAlreadyAssignedError: Case already has an agent
        StatusChangeError: Case is solved
    """
    if user_service.parse_user_id(agent_id) is None:
        raise InvalidAssignmentError("Invalid or missing agent_id")
    if amount is None or amount <= 0:
        raise InvalidAssignmentError("Valid amount is required")

    agent = user_service.get_agent(db, agent_id)
    if not agent:
        raise InvalidAssignmentError("User is not a valid agent")

    if customer.assigned_to:
        raise CaseAlreadyAssignedError("Case is already assigned")

    _apply_assignment(customer, agent, amount=amount, added_by=added_by)
    db.commit()
    db.refresh(customer)
    logger.info("Assigned customer %s to agent %s", customer.id, agent.id)
    return customer, agent


def change_officer(
    db: Session,
    customer: Customer,
    officer_id: UUID | None,
    added_by: str | None = None,
) -> None:
    """
    Set, move or clear the agent on a case. The caller commits.

    A first officer goes through the same rules as assign_customer; moving
    a case shifts the assigned_cases counter from the old agent to the new.

    Raises:
        InvalidAssignmentError: officer_id is not an agent
        StatusChangeError: Case is solved
    """
    if officer_id == customer.assigned_to:
        return
    if customer.status == CaseStatus.SOLVED.value:
        raise StatusChangeError("Cannot reassign a solved case")

    if officer_id is None:
        _release_assignment(db, customer)
        _append_note(customer, "Case unassigned", added_by)
        return

    agent = user_service.get_agent(db, officer_id)
    if not agent:
        raise InvalidAssignmentError("User is not a valid agent")

    _release_assignment(db, customer)
    _apply_assignment(customer, agent, added_by=added_by)
    logger.info("Moved customer %s to agent %s", customer.id, agent.id)


def complete_customer(
    db: Session,
    customer: Customer,
    cibil_before: int | None,
    cibil_after: int | None,
    added_by: str | None = None,
) -> Customer:
    """
    Mark a case Solved with before/after CIBIL scores.

    Assignment is not a precondition.

    Raises:
        CompletionError: Missing or out-of-range scores
        StatusChangeError: Case already solved
    """
    if cibil_before is None or cibil_after is None:
        raise CompletionError("Both CIBIL scores are required")
    for score in (cibil_before, cibil_after):
        if not CIBIL_MIN <= score <= CIBIL_MAX:
            raise CompletionError(
                f"CIBIL scores must be between {CIBIL_MIN} and {CIBIL_MAX}"
            )

    apply_status(customer, CaseStatus.SOLVED)
    customer.cibil_before = cibil_before
    customer.cibil_after = cibil_after
    _append_note(
        customer,
        f"Case marked as completed. CIBIL Before: {cibil_before}, CIBIL After: {cibil_after}",
        added_by,
    )
    db.commit()
    db.refresh(customer)
    logger.info("Completed customer %s", customer.id)
    return customer


def change_status(
    db: Session,
    customer: Customer,
    status: str,
    added_by: str | None = None,
) -> Customer:
    """Explicit status change through the guard; a real change is noted."""
    try:
        target = CaseStatus(status)
    except ValueError:
        raise StatusChangeError(f"Invalid status: {status}")

    if apply_status(customer, target):
        _append_note(customer, f"Status updated to {target.value}", added_by)
    db.commit()
    db.refresh(customer)
    return customer


def add_call_entry(db: Session, customer: Customer, data: CallEntryCreate) -> Customer:
    """Append to call history. The case status is left alone."""
    entry = {
        "response": data.response,
        "status": data.status.value,
        "next_call_date": data.next_call_date or None,
        "timestamp": utcnow().isoformat(),
    }
    customer.call_history = [*(customer.call_history or []), entry]
    db.commit()
    db.refresh(customer)
    return customer


# =============================================================================
# Payments & Documents
# =============================================================================

def _derive_payment_status(total: float | None, advance: float | None) -> str:
    if total and advance and advance >= total:
        return CasePaymentStatus.COMPLETED.value
    if advance:
        return CasePaymentStatus.PARTIAL.value
    return CasePaymentStatus.PENDING.value


def _replace_payment_proof(customer: Customer, filename: str) -> str | None:
    """
    Point documents.payment_proof at filename.

    Returns the replaced filename when nothing else references it,
    so the caller can remove it from disk.
    """
    documents = dict(customer.documents or {})
    replaced = documents.get(DocumentField.PAYMENT_PROOF.value)
    documents[DocumentField.PAYMENT_PROOF.value] = filename
    customer.documents = documents

    if not replaced or replaced == filename:
        return None
    if customer.offer and customer.offer.payment_proof_url == replaced:
        return None
    return replaced


def record_payment(
    db: Session,
    customer: Customer,
    total_amount: float | None,
    advance_amount: float | None,
    proof_filename: str | None = None,
) -> tuple[Customer, str | None]:
    """
    Store case-level fee amounts and an optional proof document.

    Returns:
        (customer, replaced proof filename or None)
    """
    if (
        total_amount is not None
        and advance_amount is not None
        and advance_amount > total_amount
    ):
        raise CustomerValidationError("Advance amount cannot exceed total amount")

    customer.total_amount = total_amount
    customer.advance_amount = advance_amount
    customer.payment_status = _derive_payment_status(total_amount, advance_amount)
    replaced = _replace_payment_proof(customer, proof_filename) if proof_filename else None
    db.commit()
    db.refresh(customer)
    return customer, replaced


def attach_payment_proof(db: Session, case_id: str, filename: str) -> tuple[Customer, str | None]:
    """
    Attach a payment proof by human case id; payment status resets to pending.

    Returns:
        (customer, replaced proof filename or None)

    Raises:
        CustomerNotFoundError: Unknown case id
    """
    customer = get_customer_by_case_id(db, case_id)
    if not customer:
        raise CustomerNotFoundError("Case not found")

    replaced = _replace_payment_proof(customer, filename)
    customer.payment_status = CasePaymentStatus.PENDING.value
    db.commit()
    db.refresh(customer)
    return customer, replaced
