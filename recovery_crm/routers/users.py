"""Users router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.db.enums import Role
from recovery_crm.schemas.user import UserRead
from recovery_crm.services import user_service

router = APIRouter()


@router.get("", response_model=list[UserRead])
def list_users(
    role: Role | None = Query(None, description="Filter by role"),
    db: Session = Depends(get_db),
):
    return user_service.list_users(db, role)
