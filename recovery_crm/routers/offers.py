"""Offers router - settlements negotiated by agents."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db, get_optional_user, parse_form
from recovery_crm.db.enums import DocumentField, Role
from recovery_crm.schemas.common import MessageResponse
from recovery_crm.schemas.offer import OfferCreate, OfferRead, OfferStats, OfferUpdate
from recovery_crm.services import offer_service
from recovery_crm.utils.file_upload import UploadRejectedError, remove_uploads, save_upload

router = APIRouter()


def _raise_for(exc: offer_service.OfferServiceError):
    if isinstance(exc, (offer_service.OfferNotFoundError, offer_service.CaseNotAssignedError)):
        raise HTTPException(status_code=404, detail=str(exc))
    raise HTTPException(status_code=400, detail=str(exc))


@router.get("", response_model=list[OfferRead])
def list_offers(db: Session = Depends(get_db)):
    return [offer_service.to_offer_read(o) for o in offer_service.list_offers(db)]


@router.get("/stats", response_model=OfferStats)
def offer_stats(agent_id: UUID | None = Query(None), db: Session = Depends(get_db)):
    """Totals for one agent, or for everyone without agent_id."""
    return offer_service.offer_stats(db, agent_id)


@router.get("/agent/{agent_id}", response_model=list[OfferRead])
def list_agent_offers(agent_id: UUID, db: Session = Depends(get_db)):
    return [offer_service.to_offer_read(o) for o in offer_service.list_offers(db, agent_id)]


@router.post("", response_model=OfferRead, status_code=201)
async def create_offer(
    customer_id: str = Form(...),
    agent_id: str = Form(...),
    deal_amount: str = Form(...),
    advance_paid: str | None = Form(None),
    case_status: str | None = Form(None),
    payment_status: str | None = Form(None),
    notes: str | None = Form(None),
    payment_proof: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    """
    Create the single offer for an assigned case.

    The case must be assigned to agent_id; a second offer is rejected.
    """
    data = parse_form(
        OfferCreate,
        customer_id=customer_id,
        agent_id=agent_id,
        deal_amount=deal_amount,
        advance_paid=advance_paid,
        case_status=case_status,
        payment_status=payment_status,
        notes=notes,
    )

    proof = None
    if payment_proof is not None and payment_proof.filename:
        try:
            proof = await save_upload(DocumentField.PAYMENT_PROOF.value, payment_proof)
        except UploadRejectedError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    try:
        offer = offer_service.create_offer(db, data, proof_filename=proof)
    except offer_service.OfferServiceError as exc:
        remove_uploads([proof])
        _raise_for(exc)
    except Exception:
        remove_uploads([proof])
        raise
    return offer_service.to_offer_read(offer)


@router.put("/{offer_id}", response_model=OfferRead)
def update_offer(offer_id: UUID, data: OfferUpdate, db: Session = Depends(get_db)):
    """Partial update of an agent's own offer."""
    try:
        offer = offer_service.update_offer(db, offer_id, data)
    except offer_service.OfferServiceError as exc:
        _raise_for(exc)
    return offer_service.to_offer_read(offer)


@router.delete("/{offer_id}", response_model=MessageResponse)
def delete_offer(
    offer_id: UUID,
    agent_id: UUID | None = Query(None, description="Owning agent; defaults to the caller"),
    current_user=Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Delete an offer owned by agent_id.

    Without agent_id the Bearer user is used; admins may delete any offer.
    """
    is_admin = bool(current_user and current_user.role == Role.ADMIN.value)
    owner_id = agent_id or (current_user.id if current_user else None)
    if not owner_id and not is_admin:
        raise HTTPException(status_code=400, detail="agent_id is required")

    try:
        proof = offer_service.delete_offer(db, offer_id, owner_id, is_admin=is_admin)
    except offer_service.OfferServiceError as exc:
        _raise_for(exc)
    remove_uploads([proof])
    return MessageResponse(message="Offer deleted successfully")
