"""Pydantic schemas for call logs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from recovery_crm.db.enums import CallLogStatus


class CallLogCreate(BaseModel):
    time: str = Field(..., min_length=1, max_length=50)
    customer: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=20)
    duration: str = ""
    status: CallLogStatus
    response: str = ""
    callback_time: str = ""
    created_by: UUID | None = None


class CallLogRead(BaseModel):
    id: UUID
    time: str
    customer: str
    phone: str
    duration: str
    status: CallLogStatus
    response: str
    callback_time: str
    created_by: UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CallLogListResponse(BaseModel):
    """Paginated call log list."""
    items: list[CallLogRead]
    total: int
    page: int
    per_page: int
    pages: int
