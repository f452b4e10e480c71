"""Case view service - the /api/cases projection over customers."""

from sqlalchemy.orm import Session, joinedload

from recovery_crm.db.enums import CaseStatus
from recovery_crm.db.models import Customer
from recovery_crm.schemas.case import CaseCustomer, CaseRead, CaseUpdate
from recovery_crm.services import customer_service
from recovery_crm.services.customer_service import CustomerServiceError, StatusChangeError


def to_case_read(customer: Customer) -> CaseRead:
    """Project a customer row onto the case view."""
    return CaseRead(
        id=customer.id,
        case_id=customer.case_id,
        customer=CaseCustomer(
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            aadhaar=customer.aadhaar,
            pan=customer.pan,
            cibil=customer.cibil,
            address=customer.address,
            bank=customer.bank,
            loan_type=customer.loan_type,
            account_number=customer.account_number,
            issues=list(customer.issues or []),
            referred_person=customer.referred_person,
        ),
        problem=customer.problem,
        assigned_date=customer.assigned_date,
        status=CaseStatus(customer.status),
        officer_id=customer.assigned_to,
        officer=customer.assignee.display_name if customer.assignee else None,
        amount=customer.amount,
        documents=dict(customer.documents or {}),
        cibil_before=customer.cibil_before,
        cibil_after=customer.cibil_after,
        resolved_date=customer.resolved_date,
        created_at=customer.created_at,
    )


def list_cases(db: Session) -> list[Customer]:
    return (
        db.query(Customer)
        .options(joinedload(Customer.assignee))
        .order_by(Customer.created_at.desc(), Customer.case_number.desc())
        .all()
    )


def update_case(db: Session, customer: Customer, data: CaseUpdate) -> Customer:
    """
    Update officer, status and CIBIL scores of a case.

    The officer goes through the same assignment rules as
    POST /api/customers/{id}/assign. Nothing is written if any part fails.

    Raises:
        InvalidAssignmentError: officer_id is not an agent
        StatusChangeError: Rejected by the transition guard
    """
    updates = data.model_dump(exclude_unset=True)

    try:
        if "officer_id" in updates:
            customer_service.change_officer(db, customer, updates["officer_id"])

        if updates.get("status"):
            try:
                target = CaseStatus(updates["status"])
            except ValueError:
                raise StatusChangeError(f"Invalid status: {updates['status']}")
            customer_service.apply_status(customer, target)
    except CustomerServiceError:
        db.rollback()
        raise

    if "cibil_before" in updates:
        customer.cibil_before = updates["cibil_before"]
    if "cibil_after" in updates:
        customer.cibil_after = updates["cibil_after"]

    db.commit()
    db.refresh(customer)
    return customer
