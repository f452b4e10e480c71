"""Pydantic schemas for agent-to-admin case requests."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from recovery_crm.db.enums import RequestStatus


class CaseRequestCreate(BaseModel):
    message: str = Field(..., min_length=1)
    agent_id: UUID | None = None
    agent_name: str | None = Field(None, max_length=255)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Request message is required")
        return cleaned


class CaseRequestAction(BaseModel):
    status: RequestStatus
    admin_response: str = Field(..., min_length=1)

    @field_validator("status")
    @classmethod
    def closing_status(cls, v: RequestStatus) -> RequestStatus:
        if v == RequestStatus.PENDING:
            raise ValueError("Invalid status")
        return v

    @field_validator("admin_response")
    @classmethod
    def strip_response(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Admin response is required")
        return cleaned


class CaseRequestRead(BaseModel):
    id: UUID
    customer_id: UUID
    case_id: str | None = None
    customer_name: str | None = None
    agent_id: UUID | None
    agent_name: str | None
    message: str
    status: RequestStatus
    admin_response: str | None
    created_at: datetime
    updated_at: datetime
