"""Dashboard router - role dashboards computed on demand."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.dashboard import (
    ActivityItem,
    AdminStats,
    AgentStats,
    DashboardMetrics,
    MarketingOverview,
    MarketingStats,
    StatCard,
)
from recovery_crm.services import dashboard_service

router = APIRouter()


@router.get("/dashboard/stats", response_model=list[StatCard])
def dashboard_stats(db: Session = Depends(get_db)):
    """Today's call and follow-up counts."""
    return dashboard_service.get_call_stats(db)


@router.get("/dashboard/telecaller/{user_id}", response_model=list[StatCard])
def telecaller_stats(user_id: UUID, db: Session = Depends(get_db)):
    return dashboard_service.get_call_stats(db, user_id=user_id)


@router.get("/dashboard/activities", response_model=list[ActivityItem])
def dashboard_activities(db: Session = Depends(get_db)):
    return dashboard_service.get_recent_activities(db)


@router.get("/dashboard/metrics", response_model=DashboardMetrics)
def dashboard_metrics(db: Session = Depends(get_db)):
    return dashboard_service.get_metrics(db)


@router.get("/admin/stats", response_model=AdminStats)
def admin_stats(db: Session = Depends(get_db)):
    return dashboard_service.get_admin_stats(db)


@router.get("/agent/stats/{officer_id}", response_model=AgentStats)
def agent_stats(officer_id: UUID, db: Session = Depends(get_db)):
    return dashboard_service.get_agent_stats(db, officer_id)


@router.get("/marketing/stats", response_model=MarketingOverview)
def marketing_overview(db: Session = Depends(get_db)):
    return dashboard_service.get_marketing_overview(db)


@router.get("/marketing/stats/{marketing_id}", response_model=MarketingStats)
def marketing_stats(marketing_id: UUID, db: Session = Depends(get_db)):
    return dashboard_service.get_marketing_stats(db, marketing_id)
