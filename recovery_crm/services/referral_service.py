"""Referral partner service."""

from sqlalchemy.orm import Session

from recovery_crm.db.models import Referral
from recovery_crm.schemas.referral import ReferralCreate


def list_referrals(db: Session) -> list[Referral]:
    return db.query(Referral).order_by(Referral.created_at.desc()).all()


def create_referral(db: Session, data: ReferralCreate) -> Referral:
    referral = Referral(
        name=data.name.strip(),
        phone=data.phone.strip(),
        cases=data.cases,
        success_rate=data.success_rate,
        commission=data.commission,
    )
    db.add(referral)
    db.commit()
    db.refresh(referral)
    return referral
