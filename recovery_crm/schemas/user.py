"""User-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from recovery_crm.db.enums import Role


class UserRead(BaseModel):
    """User profile; the password hash is never part of it."""
    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    phone: str
    role: Role
    is_active: bool
    assigned_cases: int
    last_assignment_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    id: UUID
    username: str
    display_name: str
    role: Role

    model_config = {"from_attributes": True}
