"""Attendance router."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.db.models import AttendanceLog
from recovery_crm.schemas.attendance import AttendanceRead, TodayAttendance
from recovery_crm.services import attendance_service

router = APIRouter()


def _to_read(log: AttendanceLog) -> AttendanceRead:
    user = log.user
    return AttendanceRead(
        id=log.id,
        user_id=log.user_id,
        employee=f"{user.first_name} {user.last_name}".strip() if user else "",
        email=user.email if user else None,
        role=user.role if user else None,
        login_time=log.login_time,
        logout_time=log.logout_time,
        log_date=log.log_date,
        duration=(
            attendance_service.format_duration(log.login_time, log.logout_time)
            if log.logout_time
            else "Active"
        ),
    )


@router.get("", response_model=list[AttendanceRead])
def list_attendance(db: Session = Depends(get_db)):
    """Every session, latest login first."""
    return [_to_read(log) for log in attendance_service.list_logs(db)]


@router.get("/{user_id}", response_model=TodayAttendance)
def today_attendance(user_id: UUID, db: Session = Depends(get_db)):
    """The user's latest session opened today, if any."""
    log = attendance_service.today_for_user(db, user_id)
    if not log:
        return TodayAttendance()
    return TodayAttendance(login_time=log.login_time, logout_time=log.logout_time)
