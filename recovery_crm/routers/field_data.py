"""Field visit router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.field_data import FieldDataCreate, FieldDataRead
from recovery_crm.services import field_data_service

router = APIRouter()


@router.get("", response_model=list[FieldDataRead])
def list_field_data(
    created_by: UUID | None = Query(None),
    db: Session = Depends(get_db),
):
    return field_data_service.list_field_data(db, created_by=created_by)


@router.post("", response_model=FieldDataRead, status_code=201)
def create_field_data(data: FieldDataCreate, db: Session = Depends(get_db)):
    return field_data_service.create_field_data(db, data)
