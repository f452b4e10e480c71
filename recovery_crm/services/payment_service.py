"""Payment service - received payments with optional proof documents."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from recovery_crm.db.models import Payment
from recovery_crm.schemas.payment import PaymentCreate, PaymentUpdate


logger = logging.getLogger(__name__)


def list_payments(db: Session) -> list[Payment]:
    return db.query(Payment).order_by(Payment.date.desc()).all()


def get_payment(db: Session, payment_id: UUID) -> Payment | None:
    return db.query(Payment).filter(Payment.id == payment_id).first()


def create_payment(db: Session, data: PaymentCreate, proof: str | None = None) -> Payment:
    payment = Payment(
        customer=data.customer.strip(),
        case_id=data.case_id.strip(),
        amount=data.amount,
        date=data.date,
        method=data.method.value,
        status=data.status.value,
        proof=proof,
        created_by=data.created_by,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


def update_payment(
    db: Session,
    payment: Payment,
    data: PaymentUpdate,
    proof: str | None = None,
) -> tuple[Payment, str | None]:
    """
    Partial update; a new proof replaces the old one.

    Returns:
        (payment, replaced proof filename or None)
    """
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        if hasattr(value, "value"):
            value = value.value
        setattr(payment, field, value)

    replaced = None
    if proof:
        replaced = payment.proof
        payment.proof = proof

    db.commit()
    db.refresh(payment)
    return payment, replaced


def delete_payment(db: Session, payment: Payment) -> str | None:
    payment_id, proof = payment.id, payment.proof
    db.delete(payment)
    db.commit()
    logger.info("Deleted payment %s", payment_id)
    return proof
