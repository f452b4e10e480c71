"""Payments router."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db, parse_form
from recovery_crm.schemas.common import MessageResponse
from recovery_crm.schemas.payment import PaymentCreate, PaymentRead, PaymentUpdate
from recovery_crm.services import payment_service
from recovery_crm.utils.file_upload import UploadRejectedError, remove_uploads, save_upload

router = APIRouter()

PROOF_FIELD = "proof"


async def _save_proof(proof: UploadFile | None) -> str | None:
    if proof is None or not proof.filename:
        return None
    try:
        return await save_upload(PROOF_FIELD, proof)
    except UploadRejectedError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _get_or_404(db: Session, payment_id: UUID):
    payment = payment_service.get_payment(db, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.get("", response_model=list[PaymentRead])
def list_payments(db: Session = Depends(get_db)):
    return payment_service.list_payments(db)


@router.post("", response_model=PaymentRead, status_code=201)
async def create_payment(
    customer: str = Form(...),
    case_id: str = Form(...),
    amount: str = Form(...),
    date: str = Form(...),
    method: str = Form(...),
    status: str | None = Form(None),
    created_by: str | None = Form(None),
    proof: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    data = parse_form(
        PaymentCreate,
        customer=customer,
        case_id=case_id,
        amount=amount,
        date=date,
        method=method,
        status=status,
        created_by=created_by,
    )
    stored = await _save_proof(proof)
    try:
        return payment_service.create_payment(db, data, proof=stored)
    except Exception:
        remove_uploads([stored])
        raise


@router.put("/{payment_id}", response_model=PaymentRead)
async def update_payment(
    payment_id: UUID,
    customer: str | None = Form(None),
    case_id: str | None = Form(None),
    amount: str | None = Form(None),
    date: str | None = Form(None),
    method: str | None = Form(None),
    status: str | None = Form(None),
    proof: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    payment = _get_or_404(db, payment_id)
    data = parse_form(
        PaymentUpdate,
        customer=customer,
        case_id=case_id,
        amount=amount,
        date=date,
        method=method,
        status=status,
    )
    stored = await _save_proof(proof)
    try:
        payment, replaced = payment_service.update_payment(db, payment, data, proof=stored)
    except Exception:
        remove_uploads([stored])
        raise
    remove_uploads([replaced])
    return payment


@router.delete("/{payment_id}", response_model=MessageResponse)
def delete_payment(payment_id: UUID, db: Session = Depends(get_db)):
    payment = _get_or_404(db, payment_id)
    remove_uploads([payment_service.delete_payment(db, payment)])
    return MessageResponse(message="Payment deleted successfully")
