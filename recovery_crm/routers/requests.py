"""Case requests router - admin inbox of agent requests."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.request import CaseRequestRead
from recovery_crm.services import request_service

router = APIRouter()


@router.get("", response_model=list[CaseRequestRead])
def list_requests(db: Session = Depends(get_db)):
    return [request_service.to_request_read(r) for r in request_service.list_requests(db)]
