"""Follow-ups router - telecaller leads."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.followup import FollowupCreate, FollowupRead, FollowupUpdate
from recovery_crm.services import followup_service

router = APIRouter()


@router.get("", response_model=list[FollowupRead])
def list_followups(
    search: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
):
    """Newest first; search matches name or phone."""
    return followup_service.list_followups(db, search)


@router.post("", response_model=FollowupRead, status_code=201)
def create_followup(data: FollowupCreate, db: Session = Depends(get_db)):
    try:
        return followup_service.create_followup(db, data)
    except followup_service.FollowupValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{followup_id}", response_model=FollowupRead)
def update_followup(
    followup_id: UUID,
    data: FollowupUpdate,
    db: Session = Depends(get_db),
):
    """Record a call outcome. Call Back requires callback_time."""
    followup = followup_service.get_followup(db, followup_id)
    if not followup:
        raise HTTPException(status_code=404, detail="Followup not found")
    try:
        return followup_service.update_followup(db, followup, data)
    except followup_service.FollowupValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
