"""Follow-up (lead) service."""

from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from recovery_crm.db.enums import FollowupStatus
from recovery_crm.db.models import Followup
from recovery_crm.schemas.followup import FollowupCreate, FollowupUpdate
from recovery_crm.utils.normalization import escape_like_string, normalize_search_text


CALLBACK_REQUIRED = 'Callback time is required when status is "Call Back"'


class FollowupServiceError(Exception):
    """Base exception for follow-up service errors."""
    pass


class FollowupNotFoundError(FollowupServiceError):
    pass


class FollowupValidationError(FollowupServiceError):
    pass


def _callback_time_for(status: str, callback_time: str | None) -> str:
    """Call Back needs a callback time; every other status clears it."""
    if status == FollowupStatus.CALL_BACK.value:
        if not callback_time or not callback_time.strip():
            raise FollowupValidationError(CALLBACK_REQUIRED)
        return callback_time.strip()
    return ""


def list_followups(db: Session, search: str | None = None) -> list[Followup]:
    query = db.query(Followup)
    term = normalize_search_text(search)
    if term:
        pattern = f"%{escape_like_string(term)}%"
        query = query.filter(
            or_(
                Followup.name.ilike(pattern, escape="\\"),
                Followup.phone.ilike(pattern, escape="\\"),
            )
        )
    return query.order_by(Followup.created_at.desc()).all()


def get_followup(db: Session, followup_id: UUID) -> Followup | None:
    return db.query(Followup).filter(Followup.id == followup_id).first()


def create_followup(db: Session, data: FollowupCreate) -> Followup:
    followup = Followup(
        time=data.time,
        name=data.name,
        phone=data.phone.strip(),
        response=data.response,
        issue_type=data.issue_type,
        village=data.village,
        status=data.status.value,
        callback_time=_callback_time_for(data.status.value, data.callback_time),
        created_by=data.created_by,
    )
    db.add(followup)
    db.commit()
    db.refresh(followup)
    return followup


def update_followup(db: Session, followup: Followup, data: FollowupUpdate) -> Followup:
    """
    Record a call outcome.

    Raises:
        FollowupValidationError: Call Back without a callback time
    """
    status = data.status.value if data.status is not None else followup.status
    requested = data.callback_time
    if requested is None and data.status is None:
        requested = followup.callback_time
    callback_time = _callback_time_for(status, requested)

    if data.response is not None:
        followup.response = data.response
    followup.status = status
    followup.callback_time = callback_time

    db.commit()
    db.refresh(followup)
    return followup
