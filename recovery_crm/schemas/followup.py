"""Pydantic schemas for follow-ups (leads)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from recovery_crm.db.enums import FollowupStatus


class FollowupCreate(BaseModel):
    time: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=20)
    response: str = ""
    issue_type: str = ""
    village: str = ""
    status: FollowupStatus = FollowupStatus.PENDING
    callback_time: str = ""
    created_by: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class FollowupUpdate(BaseModel):
    """Call outcome for a lead. A Call Back status needs callback_time."""
    response: str | None = None
    status: FollowupStatus | None = None
    callback_time: str | None = None


class FollowupRead(BaseModel):
    id: UUID
    time: str
    name: str
    phone: str
    response: str
    issue_type: str
    village: str
    status: FollowupStatus
    callback_time: str
    created_by: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
