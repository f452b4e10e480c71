"""Pydantic schemas for expenses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    user_id: UUID
    date: str = Field(..., min_length=1, max_length=20)
    amount: float = Field(..., ge=0)
    advance: float = Field(0, ge=0)
    type: str = Field(..., min_length=1, max_length=100)
    description: str = ""


class ExpenseRead(BaseModel):
    id: UUID
    user_id: UUID
    date: str
    amount: float
    advance: float
    type: str
    description: str
    created_at: datetime

    model_config = {"from_attributes": True}
