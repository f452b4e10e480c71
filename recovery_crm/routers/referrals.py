"""Referral partners router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.referral import ReferralCreate, ReferralRead
from recovery_crm.services import referral_service

router = APIRouter()


@router.get("", response_model=list[ReferralRead])
def list_referrals(db: Session = Depends(get_db)):
    return referral_service.list_referrals(db)


@router.post("", response_model=ReferralRead, status_code=201)
def create_referral(data: ReferralCreate, db: Session = Depends(get_db)):
    return referral_service.create_referral(db, data)
