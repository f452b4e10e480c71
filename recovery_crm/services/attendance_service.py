"""Attendance service - login/logout sessions per user."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from recovery_crm.db.models import AttendanceLog
from recovery_crm.utils.time_windows import as_utc, local_date_string, today_bounds, utcnow


class AttendanceServiceError(Exception):
    """Base exception for attendance service errors."""
    pass


class NoOpenSessionError(AttendanceServiceError):
    """The user has no attendance row without a logout time."""
    pass


def format_duration(login_time: datetime, logout_time: datetime) -> str:
    """Whole hours and minutes between two instants, e.g. "2h 5m"."""
    seconds = max(0, int((as_utc(logout_time) - as_utc(login_time)).total_seconds()))
    hours, remainder = divmod(seconds, 3600)
    return f"{hours}h {remainder // 60}m"


def open_session(db: Session, user_id: UUID) -> AttendanceLog:
    """Record a login. Caller commits."""
    now = utcnow()
    log = AttendanceLog(
        user_id=user_id,
        login_time=now,
        log_date=local_date_string(now),
    )
    db.add(log)
    return log


def close_session(db: Session, user_id: UUID) -> AttendanceLog:
    """
    Stamp logout on the user's latest open session.

    Raises:
        NoOpenSessionError: If every session is already closed
    """
    log = (
        db.query(AttendanceLog)
        .filter(
            AttendanceLog.user_id == user_id,
            AttendanceLog.logout_time.is_(None),
        )
        .order_by(AttendanceLog.login_time.desc())
        .first()
    )
    if not log:
        raise NoOpenSessionError("No active session found")

    log.logout_time = utcnow()
    db.commit()
    db.refresh(log)
    return log


def list_logs(db: Session, user_id: UUID | None = None) -> list[AttendanceLog]:
    query = db.query(AttendanceLog).options(joinedload(AttendanceLog.user))
    if user_id:
        query = query.filter(AttendanceLog.user_id == user_id)
    return query.order_by(AttendanceLog.login_time.desc()).all()


def today_for_user(db: Session, user_id: UUID) -> AttendanceLog | None:
    """Latest session opened during the current business day."""
    start, end = today_bounds()
    return (
        db.query(AttendanceLog)
        .filter(
            AttendanceLog.user_id == user_id,
            AttendanceLog.login_time >= start,
            AttendanceLog.login_time < end,
        )
        .order_by(AttendanceLog.login_time.desc())
        .first()
    )
