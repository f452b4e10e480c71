"""Offer service - one negotiated settlement per case."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from recovery_crm.db.enums import DocumentField, OfferCaseStatus
from recovery_crm.db.models import Customer, Offer
from recovery_crm.schemas.offer import OfferCreate, OfferRead, OfferStats, OfferUpdate


logger = logging.getLogger(__name__)


class OfferServiceError(Exception):
    """Base exception for offer service errors."""
    pass


class OfferNotFoundError(OfferServiceError):
    """Offer not found for this agent."""
    pass


class CaseNotAssignedError(OfferServiceError):
    """Case missing or not assigned to the agent."""
    pass


class DuplicateOfferError(OfferServiceError):
    """The case already has an offer."""
    pass


class OfferValidationError(OfferServiceError):
    pass


def _is_offer_conflict(error: IntegrityError) -> bool:
    constraint_name = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint_name == "uq_offer_customer":
        return True
    message = str(error.orig) if error.orig else str(error)
    return "uq_offer_customer" in message or "offers.customer_id" in message


def _check_amounts(deal_amount: float, advance_paid: float) -> None:
    if advance_paid > deal_amount:
        raise OfferValidationError("Advance paid cannot exceed deal amount")


def to_offer_read(offer: Offer) -> OfferRead:
    customer = offer.customer
    return OfferRead(
        id=offer.id,
        customer_id=offer.customer_id,
        case_id=customer.case_id if customer else None,
        customer_name=customer.name if customer else None,
        problem=customer.problem if customer else None,
        agent_id=offer.agent_id,
        deal_amount=offer.deal_amount,
        advance_paid=offer.advance_paid,
        pending_amount=offer.pending_amount,
        case_status=OfferCaseStatus(offer.case_status),
        payment_status=offer.payment_status,
        payment_proof_url=offer.payment_proof_url,
        notes=offer.notes,
        created_at=offer.created_at,
        updated_at=offer.updated_at,
    )


def create_offer(
    db: Session,
    data: OfferCreate,
    proof_filename: str | None = None,
) -> Offer:
    """
    Create the offer for a case assigned to the agent.

    A proof file is also recorded on the case documents in the same commit.

    Raises:
        CaseNotAssignedError: Case missing or assigned to someone else
        DuplicateOfferError: Case already has an offer
        OfferValidationError: Advance larger than deal
    """
    customer = db.query(Customer).filter(
        Customer.id == data.customer_id,
        Customer.assigned_to == data.agent_id,
    ).first()
    if not customer:
        raise CaseNotAssignedError("Case not found or not assigned to you")

    # Fast path; uq_offer_customer is authoritative
    existing = db.query(Offer.id).filter(Offer.customer_id == customer.id).first()
    if existing:
        raise DuplicateOfferError("An offer already exists for this case")

    _check_amounts(data.deal_amount, data.advance_paid)

    offer = Offer(
        customer_id=customer.id,
        agent_id=data.agent_id,
        deal_amount=data.deal_amount,
        advance_paid=data.advance_paid,
        case_status=data.case_status.value,
        payment_status=data.payment_status.value,
        notes=data.notes,
        payment_proof_url=proof_filename,
    )
    db.add(offer)
    if proof_filename:
        customer.documents = {
            **(customer.documents or {}),
            DocumentField.PAYMENT_PROOF.value: proof_filename,
        }

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_offer_conflict(exc):
            raise DuplicateOfferError("An offer already exists for this case")
        raise
    db.refresh(offer)
    logger.info("Created offer %s for customer %s", offer.id, customer.id)
    return offer


def get_offer(db: Session, offer_id: UUID) -> Offer | None:
    return db.query(Offer).filter(Offer.id == offer_id).first()


def list_offers(db: Session, agent_id: UUID | None = None) -> list[Offer]:
    query = db.query(Offer).options(joinedload(Offer.customer))
    if agent_id:
        query = query.filter(Offer.agent_id == agent_id)
    return query.order_by(Offer.created_at.desc()).all()


def offer_stats(db: Session, agent_id: UUID | None = None) -> OfferStats:
    """Offer count, total deal value and % of offers with case_status Completed."""
    offers = list_offers(db, agent_id)
    total = len(offers)
    completed = sum(1 for o in offers if o.case_status == OfferCaseStatus.COMPLETED.value)
    return OfferStats(
        total_offers=total,
        total_deal_value=round(sum(o.deal_amount or 0 for o in offers), 2),
        success_rate=round(completed / total * 100) if total else 0,
    )


def update_offer(db: Session, offer_id: UUID, data: OfferUpdate) -> Offer:
    """
    Partial update of the agent's own offer; pending_amount is re-derived.

    Raises:
        OfferNotFoundError: No offer with this id for this agent
    """
    offer = db.query(Offer).filter(
        Offer.id == offer_id,
        Offer.agent_id == data.agent_id,
    ).first()
    if not offer:
        raise OfferNotFoundError("Offer not found")

    updates = data.model_dump(exclude_unset=True, exclude={"agent_id"})
    deal = updates.get("deal_amount", offer.deal_amount)
    advance = updates.get("advance_paid", offer.advance_paid)
    if deal is None:
        deal = offer.deal_amount
    if advance is None:
        advance = offer.advance_paid
    _check_amounts(deal, advance)

    for field, value in updates.items():
        if value is None and field != "notes":
            continue
        if hasattr(value, "value"):
            value = value.value
        setattr(offer, field, value)

    db.commit()
    db.refresh(offer)
    return offer


def delete_offer(
    db: Session,
    offer_id: UUID,
    agent_id: UUID,
    is_admin: bool = False,
) -> str | None:
    """
    Delete an offer owned by agent_id (admins may delete any offer).

    Returns:
        The proof filename, if any, for the caller to remove. The case
        stops referencing it in the same commit.

    Raises:
        OfferNotFoundError: No matching offer
    """
    query = db.query(Offer).filter(Offer.id == offer_id)
    if not is_admin:
        query = query.filter(Offer.agent_id == agent_id)
    offer = query.first()
    if not offer:
        raise OfferNotFoundError("Offer not found")

    proof = offer.payment_proof_url
    customer = offer.customer
    documents = dict(customer.documents or {}) if customer else {}
    if proof and documents.get(DocumentField.PAYMENT_PROOF.value) == proof:
        documents.pop(DocumentField.PAYMENT_PROOF.value)
        customer.documents = documents

    db.delete(offer)
    db.commit()
    logger.info("Deleted offer %s", offer_id)
    return proof
