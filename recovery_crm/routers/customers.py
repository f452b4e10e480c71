"""Customers router - case intake, workflow and documents."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db, get_optional_user, note_author, parse_form
from recovery_crm.db.enums import CaseStatus, DocumentField
from recovery_crm.db.models import Customer
from recovery_crm.schemas.common import MessageResponse
from recovery_crm.schemas.customer import (
    AssignResponse,
    CallEntryCreate,
    CallHistoryResponse,
    CustomerAssign,
    CustomerComplete,
    CustomerCreate,
    CustomerPayment,
    CustomerRead,
    CustomerStatusChange,
    CustomerUpdate,
    PaymentProofUploaded,
)
from recovery_crm.schemas.request import CaseRequestAction, CaseRequestCreate, CaseRequestRead
from recovery_crm.schemas.user import UserSummary
from recovery_crm.services import customer_service, request_service
from recovery_crm.utils.file_upload import (
    UploadRejectedError,
    remove_uploads,
    save_optional_uploads,
    save_upload,
)


logger = logging.getLogger(__name__)

router = APIRouter()


def _to_read(customer: Customer) -> CustomerRead:
    read = CustomerRead.model_validate(customer)
    read.assigned_to_name = customer.assignee.display_name if customer.assignee else None
    return read


def _get_or_404(db: Session, customer_id: UUID) -> Customer:
    customer = customer_service.get_customer(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


def _raise_for(exc: customer_service.CustomerServiceError):
    if isinstance(exc, customer_service.CustomerNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc))
    raise HTTPException(status_code=400, detail=str(exc))


async def _store(uploads: dict[str, UploadFile | None]) -> dict[str, str]:
    try:
        return await save_optional_uploads(uploads)
    except UploadRejectedError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


# =============================================================================
# Collection routes
# =============================================================================

@router.get("", response_model=list[CustomerRead])
def list_customers(
    status: CaseStatus | None = Query(None),
    assigned_to: UUID | None = Query(None),
    q: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
):
    """List customers, newest first."""
    customers = customer_service.list_customers(db, status=status, assigned_to=assigned_to, q=q)
    return [_to_read(c) for c in customers]


@router.post("", response_model=CustomerRead, status_code=201)
async def create_customer(
    name: str = Form(...),
    phone: str = Form(...),
    problem: str = Form(...),
    email: str | None = Form(None),
    aadhaar: str | None = Form(None),
    pan: str | None = Form(None),
    cibil: str | None = Form(None),
    address: str | None = Form(None),
    bank: str | None = Form(None),
    other_bank: str | None = Form(None),
    loan_type: str | None = Form(None),
    account_number: str | None = Form(None),
    issues: list[str] = Form([]),
    page_number: str | None = Form(None),
    referred_person: str | None = Form(None),
    telecaller_id: str | None = Form(None),
    telecaller_name: str | None = Form(None),
    converted_from_lead_id: str | None = Form(None),
    priority: str | None = Form(None),
    aadhaar_doc: UploadFile | None = File(None),
    pan_doc: UploadFile | None = File(None),
    account_statement_doc: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    """
    Create a customer (case) from a multipart form.

    Uploaded documents are removed again if the database write fails.
    """
    data = parse_form(
        CustomerCreate,
        name=name,
        phone=phone,
        problem=problem,
        email=email,
        aadhaar=aadhaar,
        pan=pan,
        cibil=cibil,
        address=address,
        bank=bank,
        other_bank=other_bank,
        loan_type=loan_type,
        account_number=account_number,
        issues=issues,
        page_number=page_number,
        referred_person=referred_person,
        telecaller_id=telecaller_id,
        telecaller_name=telecaller_name,
        converted_from_lead_id=converted_from_lead_id,
        priority=priority,
    )
    documents = await _store({
        DocumentField.AADHAAR.value: aadhaar_doc,
        DocumentField.PAN.value: pan_doc,
        DocumentField.ACCOUNT_STATEMENT.value: account_statement_doc,
    })

    try:
        customer = customer_service.create_customer(db, data, documents=documents)
    except customer_service.CustomerServiceError as exc:
        remove_uploads(documents.values())
        _raise_for(exc)
    except Exception:
        remove_uploads(documents.values())
        raise
    return _to_read(customer)


@router.get("/assigned/{user_id}", response_model=list[CustomerRead])
def list_assigned(user_id: UUID, db: Session = Depends(get_db)):
    """Cases assigned to an agent."""
    return [_to_read(c) for c in customer_service.list_assigned(db, user_id)]


@router.post("/upload-payment-proof/{case_id}", response_model=PaymentProofUploaded)
async def upload_payment_proof(
    case_id: str,
    payment_proof: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    """Attach a payment proof by human case id (CASE-0001)."""
    if payment_proof is None or not payment_proof.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    try:
        filename = await save_upload(DocumentField.PAYMENT_PROOF.value, payment_proof)
    except UploadRejectedError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        customer, replaced = customer_service.attach_payment_proof(db, case_id, filename)
    except customer_service.CustomerServiceError as exc:
        remove_uploads([filename])
        _raise_for(exc)
    remove_uploads([replaced])
    return PaymentProofUploaded(
        message="Payment proof uploaded successfully",
        file=filename,
        customer=_to_read(customer),
    )


@router.post("/requests/{request_id}/action", response_model=CaseRequestRead)
def act_on_request(
    request_id: UUID,
    data: CaseRequestAction,
    db: Session = Depends(get_db),
):
    """Resolve or reject an agent request."""
    try:
        request = request_service.take_action(db, request_id, data)
    except request_service.RequestNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except request_service.RequestServiceError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return request_service.to_request_read(request)


# =============================================================================
# Single customer
# =============================================================================

@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: UUID, db: Session = Depends(get_db)):
    return _to_read(_get_or_404(db, customer_id))


@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: UUID,
    data: CustomerUpdate,
    db: Session = Depends(get_db),
):
    """Partial update; status changes go through the transition guard."""
    customer = _get_or_404(db, customer_id)
    try:
        customer = customer_service.update_customer(db, customer, data)
    except customer_service.CustomerServiceError as exc:
        _raise_for(exc)
    return _to_read(customer)


@router.delete("/{customer_id}", response_model=MessageResponse)
def delete_customer(customer_id: UUID, db: Session = Depends(get_db)):
    customer = _get_or_404(db, customer_id)
    filenames = customer_service.delete_customer(db, customer)
    remove_uploads(filenames)
    return MessageResponse(message="Customer deleted successfully")


@router.post("/{customer_id}/assign", response_model=AssignResponse)
def assign_customer(
    customer_id: UUID,
    data: CustomerAssign,
    current_user=Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Assign a case to an agent with an agreed amount.

    Rejects non-agents, non-positive amounts, assigned and solved cases.
    """
    customer = _get_or_404(db, customer_id)
    try:
        customer, agent = customer_service.assign_customer(
            db,
            customer,
            agent_id=data.agent_id,
            amount=data.amount,
            added_by=note_author(current_user),
        )
    except customer_service.CustomerServiceError as exc:
        _raise_for(exc)
    return AssignResponse(
        message="Case assigned successfully",
        customer=_to_read(customer),
        agent=UserSummary.model_validate(agent),
    )


@router.post("/{customer_id}/complete", response_model=CustomerRead)
def complete_customer(
    customer_id: UUID,
    data: CustomerComplete,
    current_user=Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Mark a case Solved with CIBIL scores before and after."""
    customer = _get_or_404(db, customer_id)
    try:
        customer = customer_service.complete_customer(
            db,
            customer,
            cibil_before=data.cibil_before,
            cibil_after=data.cibil_after,
            added_by=note_author(current_user),
        )
    except customer_service.CustomerServiceError as exc:
        _raise_for(exc)
    return _to_read(customer)


@router.post("/{customer_id}/status", response_model=CustomerRead)
def change_status(
    customer_id: UUID,
    data: CustomerStatusChange,
    current_user=Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    customer = _get_or_404(db, customer_id)
    try:
        customer = customer_service.change_status(
            db,
            customer,
            data.status,
            added_by=data.added_by or note_author(current_user),
        )
    except customer_service.CustomerServiceError as exc:
        _raise_for(exc)
    return _to_read(customer)


@router.post("/{customer_id}/call", response_model=CustomerRead)
def add_call(
    customer_id: UUID,
    data: CallEntryCreate,
    db: Session = Depends(get_db),
):
    """Append a call-history entry; the case status is not changed."""
    customer = _get_or_404(db, customer_id)
    return _to_read(customer_service.add_call_entry(db, customer, data))


@router.get("/{customer_id}/call-history", response_model=CallHistoryResponse)
def call_history(customer_id: UUID, db: Session = Depends(get_db)):
    customer = _get_or_404(db, customer_id)
    return CallHistoryResponse(call_history=customer.call_history or [])


@router.post("/{customer_id}/payment", response_model=CustomerRead)
async def record_payment(
    customer_id: UUID,
    total_amount: str | None = Form(None),
    advance_amount: str | None = Form(None),
    payment_proof: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    """Case-level fee amounts with an optional proof document."""
    customer = _get_or_404(db, customer_id)
    data = parse_form(CustomerPayment, total_amount=total_amount, advance_amount=advance_amount)
    stored = await _store({DocumentField.PAYMENT_PROOF.value: payment_proof})
    proof = stored.get(DocumentField.PAYMENT_PROOF.value)

    try:
        customer, replaced = customer_service.record_payment(
            db,
            customer,
            total_amount=data.total_amount,
            advance_amount=data.advance_amount,
            proof_filename=proof,
        )
    except customer_service.CustomerServiceError as exc:
        remove_uploads(stored.values())
        _raise_for(exc)
    remove_uploads([replaced])
    return _to_read(customer)


@router.post("/{customer_id}/request", response_model=CaseRequestRead, status_code=201)
def create_request(
    customer_id: UUID,
    data: CaseRequestCreate,
    current_user=Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Agent question or request to admins about a case."""
    customer = _get_or_404(db, customer_id)
    request = request_service.create_request(
        db,
        customer,
        data,
        agent_id=current_user.id if current_user else None,
    )
    return request_service.to_request_read(request)


@router.get("/{customer_id}/requests", response_model=list[CaseRequestRead])
def list_case_requests(customer_id: UUID, db: Session = Depends(get_db)):
    _get_or_404(db, customer_id)
    return [
        request_service.to_request_read(r)
        for r in request_service.list_requests(db, customer_id=customer_id)
    ]
