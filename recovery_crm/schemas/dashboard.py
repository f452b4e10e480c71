"""Pydantic schemas for dashboard aggregates."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from recovery_crm.schemas.attendance import TodayAttendance


class StatCard(BaseModel):
    """A single dashboard tile."""
    key: str
    icon: str
    label: str
    value: int | float | str
    color: str | None = None


class ActivityItem(BaseModel):
    icon: str
    icon_color: str
    text_color: str
    title: str
    time: str
    details: str


class DashboardMetrics(BaseModel):
    """Last-7-day rates as percentages with one decimal."""
    conversion_rate: float
    call_completion: float
    followup_rate: float


class RecentTransaction(BaseModel):
    id: UUID
    case_id: str
    customer: str
    officer: str
    amount: float
    status: str


class AdminStats(BaseModel):
    top_stats: list[StatCard]
    bottom_stats: list[StatCard]
    recent_transactions: list[RecentTransaction]


class AgentRecentCase(BaseModel):
    id: UUID
    case_id: str
    customer: str
    problem: str
    assigned_date: datetime | None
    status: str
    days_count: int


class AgentStats(BaseModel):
    stats: list[StatCard]
    recent_cases: list[AgentRecentCase]


class VisitItem(BaseModel):
    id: UUID
    date: str
    bank: str
    manager: str
    contact: str
    area: str
    manager_type: str


class MarketingStats(BaseModel):
    stats: list[StatCard]
    visits: list[VisitItem]
    attendance: TodayAttendance


class MarketingOverview(BaseModel):
    top_stats: list[StatCard]
    bottom_stats: list[StatCard]
    recent_visits: list[VisitItem]
