"""Cases router - case view over customers."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.case import CaseRead, CaseUpdate
from recovery_crm.services import case_service, customer_service

router = APIRouter()


@router.get("", response_model=list[CaseRead])
def list_cases(db: Session = Depends(get_db)):
    return [case_service.to_case_read(c) for c in case_service.list_cases(db)]


@router.put("/{case_id}", response_model=CaseRead)
def update_case(case_id: UUID, data: CaseUpdate, db: Session = Depends(get_db)):
    """Update officer, status or CIBIL scores of a case."""
    customer = customer_service.get_customer(db, case_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Case not found")
    try:
        customer = case_service.update_case(db, customer, data)
    except customer_service.CustomerServiceError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return case_service.to_case_read(customer)
