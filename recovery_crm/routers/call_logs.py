"""Call logs router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.call_log import CallLogCreate, CallLogListResponse, CallLogRead
from recovery_crm.services import call_log_service
from recovery_crm.utils.pagination import PaginationParams, get_pagination, page_meta

router = APIRouter()


@router.get("", response_model=CallLogListResponse)
def list_call_logs(
    pagination: PaginationParams = Depends(get_pagination),
    search: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
):
    items, total = call_log_service.list_call_logs(db, pagination, search)
    return CallLogListResponse(
        items=[CallLogRead.model_validate(i) for i in items],
        **page_meta(total, pagination),
    )


@router.post("", response_model=CallLogRead, status_code=201)
def create_call_log(data: CallLogCreate, db: Session = Depends(get_db)):
    return call_log_service.create_call_log(db, data)
