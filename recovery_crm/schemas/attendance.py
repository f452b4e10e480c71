"""Pydantic schemas for attendance logs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class AttendanceRead(BaseModel):
    id: UUID
    user_id: UUID
    employee: str
    email: str | None
    role: str | None
    login_time: datetime
    logout_time: datetime | None
    log_date: str
    duration: str  # "{h}h {m}m" or "Active"


class TodayAttendance(BaseModel):
    login_time: datetime | None = None
    logout_time: datetime | None = None
