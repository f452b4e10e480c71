"""Pydantic schemas for marketing field visits."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class FieldDataCreate(BaseModel):
    bank_name: str | None = Field(None, max_length=255)
    bank_area: str | None = Field(None, max_length=255)
    manager_name: str | None = Field(None, max_length=255)
    manager_phone: str | None = Field(None, max_length=20)
    manager_type: str | None = Field(None, max_length=100)
    executive_code: str | None = Field(None, max_length=100)
    collection_data: str | None = None
    created_by: UUID | None = None


class FieldDataRead(FieldDataCreate):
    id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}
