"""Dashboard service - counts and sums for the role dashboards.

All windows are business-day windows (see utils.time_windows) converted
to UTC bounds before they reach a query.
"""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from recovery_crm.db.enums import CallLogStatus, CaseStatus, FollowupStatus, Role
from recovery_crm.db.models import CallLog, Customer, Expense, FieldData, Followup, Offer
from recovery_crm.schemas.attendance import TodayAttendance
from recovery_crm.schemas.dashboard import (
    ActivityItem,
    AdminStats,
    AgentRecentCase,
    AgentStats,
    DashboardMetrics,
    MarketingOverview,
    MarketingStats,
    RecentTransaction,
    StatCard,
    VisitItem,
)
from recovery_crm.services import attendance_service, expense_service, field_data_service, user_service
from recovery_crm.utils.money import format_inr, percentage
from recovery_crm.utils.time_windows import (
    days_ago,
    local_date_string,
    month_start,
    today_bounds,
    whole_days_since,
)


RECENT_LIMIT = 5
METRICS_WINDOW_DAYS = 7


def _card(key: str, icon: str, label: str, value, color: str | None = None) -> StatCard:
    return StatCard(key=key, icon=icon, label=label, value=value, color=color)


def _sum(db: Session, column, *filters) -> float:
    value = db.query(func.coalesce(func.sum(column), 0)).filter(*filters).scalar()
    return float(value or 0)


# =============================================================================
# Telecaller dashboard
# =============================================================================

def get_call_stats(db: Session, user_id: UUID | None = None) -> list[StatCard]:
    """
    Today's call counts and pending follow-ups.

    Pending follow-ups are leads created today that still have no response.
    With user_id, only that user's call logs and follow-ups count.
    """
    start, end = today_bounds()
    call_filters = [CallLog.created_at >= start, CallLog.created_at < end]
    followup_filters = [
        Followup.created_at >= start,
        Followup.created_at < end,
        Followup.response == "",
    ]
    if user_id:
        call_filters.append(CallLog.created_by == user_id)
        followup_filters.append(Followup.created_by == user_id)

    rows = (
        db.query(CallLog.status, func.count(CallLog.id))
        .filter(*call_filters)
        .group_by(CallLog.status)
        .all()
    )
    by_status = {status: count for status, count in rows}
    todays_calls = sum(by_status.values())
    responsive = by_status.get(CallLogStatus.CONNECTED.value, 0)
    no_response = sum(by_status.get(s, 0) for s in CallLogStatus.no_response())
    pending_followups = db.query(func.count(Followup.id)).filter(*followup_filters).scalar() or 0

    return [
        _card("todays_calls", "fa-phone", "Today's Calls", todays_calls, "bg-blue-500"),
        _card("responsive_calls", "fa-check-circle", "Responsive Calls", responsive, "bg-green-500"),
        _card("no_response_calls", "fa-times-circle", "No Response", no_response, "bg-red-500"),
        _card("pending_followups", "fa-bell", "Pending Follow-ups", pending_followups, "bg-yellow-500"),
    ]


def _activity_for(log: CallLog) -> ActivityItem:
    if log.status == CallLogStatus.CONNECTED.value:
        return ActivityItem(
            icon="fa-phone",
            icon_color="bg-blue-100",
            text_color="text-blue-600",
            title=f"Call with {log.customer}",
            time=log.time,
            details=f"Connected · {log.response or 'No details'}",
        )
    if log.status in CallLogStatus.no_response():
        return ActivityItem(
            icon="fa-times-circle",
            icon_color="bg-red-100",
            text_color="text-red-600",
            title=f"Missed call with {log.customer}",
            time=log.time,
            details=f"{log.status} · Will try again later",
        )
    if log.status == CallLogStatus.CALL_BACK.value:
        return ActivityItem(
            icon="fa-bell",
            icon_color="bg-yellow-100",
            text_color="text-yellow-600",
            title=f"Callback scheduled for {log.customer}",
            time=log.time,
            details=f"Callback at {log.callback_time or 'unknown time'}",
        )
    return ActivityItem(
        icon="fa-info-circle",
        icon_color="bg-gray-100",
        text_color="text-gray-600",
        title=f"Activity with {log.customer}",
        time=log.time,
        details=f"{log.status} · {log.response or 'No details'}",
    )


def get_recent_activities(db: Session) -> list[ActivityItem]:
    """Today's five most recent call logs as activity items."""
    start, end = today_bounds()
    logs = (
        db.query(CallLog)
        .filter(CallLog.created_at >= start, CallLog.created_at < end)
        .order_by(CallLog.created_at.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    return [_activity_for(log) for log in logs]


def get_metrics(db: Session) -> DashboardMetrics:
    """Conversion, completion and follow-up rates over the last 7 days."""
    since = days_ago(METRICS_WINDOW_DAYS)
    rows = (
        db.query(CallLog.status, func.count(CallLog.id))
        .filter(CallLog.created_at >= since)
        .group_by(CallLog.status)
        .all()
    )
    by_status = {status: count for status, count in rows}
    total_calls = sum(by_status.values())
    connected = by_status.get(CallLogStatus.CONNECTED.value, 0)
    completed = sum(by_status.get(s, 0) for s in CallLogStatus.completed())
    followups = (
        db.query(func.count(Followup.id)).filter(Followup.created_at >= since).scalar() or 0
    )

    return DashboardMetrics(
        conversion_rate=percentage(connected, total_calls),
        call_completion=percentage(completed, total_calls),
        followup_rate=percentage(followups, total_calls),
    )


# =============================================================================
# Admin dashboard
# =============================================================================

def get_admin_stats(db: Session) -> AdminStats:
    total_customers = db.query(func.count(Customer.id)).scalar() or 0
    active_cases = (
        db.query(func.count(Customer.id))
        .filter(Customer.status == CaseStatus.IN_PROGRESS.value)
        .scalar()
        or 0
    )
    total_leads = db.query(func.count(Followup.id)).scalar() or 0
    pending_leads = (
        db.query(func.count(Followup.id))
        .filter(Followup.status == FollowupStatus.PENDING.value)
        .scalar()
        or 0
    )

    revenue = _sum(db, Offer.deal_amount)
    advance = _sum(db, Offer.advance_paid)
    pending = _sum(db, Offer.pending_amount)
    expense = expense_service.total_amount(db)
    profit = revenue - expense

    top_stats = [
        _card("total_customers", "fa-users", "Total Customers", total_customers),
        _card("active_cases", "fa-briefcase", "Active Cases", active_cases),
        _card("total_leads", "fa-briefcase", "Total Leads", total_leads),
        _card("pending_leads", "fa-briefcase", "Pending Leads", pending_leads),
        _card("total_revenue", "fa-money-bill-wave", "Total Revenue", format_inr(revenue)),
        _card("advance_received", "fa-money-bill-wave", "Advance Received", format_inr(advance)),
        _card("pending_amount", "fa-money-bill-wave", "Pending Amount", format_inr(pending)),
        _card("total_expense", "fa-money-bill-wave", "Total Expense", format_inr(expense)),
        _card("total_profit", "fa-chart-line", "Total Profit", format_inr(profit)),
    ]

    roles = user_service.count_by_role(db)
    bottom_stats = [
        _card("agents", "fa-user-tie", "Agents", roles.get(Role.AGENT.value, 0)),
        _card("telecallers", "fa-phone", "Telecallers", roles.get(Role.TELECALLER.value, 0)),
        _card("marketing", "fa-chart-line", "Marketing", roles.get(Role.MARKETING.value, 0)),
        _card("referral_partners", "fa-user-friends", "Referral Partners", roles.get(Role.REFERRAL.value, 0)),
    ]

    recent = (
        db.query(Customer)
        .options(joinedload(Customer.assignee))
        .order_by(Customer.created_at.desc(), Customer.case_number.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    transactions = [
        RecentTransaction(
            id=c.id,
            case_id=c.case_id,
            customer=c.name,
            officer=c.assignee.display_name if c.assignee else "Unassigned",
            amount=c.amount or 0,
            status=c.status,
        )
        for c in recent
    ]

    return AdminStats(top_stats=top_stats, bottom_stats=bottom_stats, recent_transactions=transactions)


# =============================================================================
# Agent dashboard
# =============================================================================

def get_agent_stats(db: Session, officer_id: UUID) -> AgentStats:
    """Case counts, offer sums and recent assignments for one agent."""
    rows = (
        db.query(Customer.status, func.count(Customer.id))
        .filter(Customer.assigned_to == officer_id)
        .group_by(Customer.status)
        .all()
    )
    by_status = {status: count for status, count in rows}
    assigned = sum(by_status.values())
    solved = by_status.get(CaseStatus.SOLVED.value, 0)
    in_progress = by_status.get(CaseStatus.IN_PROGRESS.value, 0)

    revenue = _sum(db, Offer.deal_amount, Offer.agent_id == officer_id)
    pending = _sum(db, Offer.pending_amount, Offer.agent_id == officer_id)

    stats = [
        _card("assigned_cases", "fa-briefcase", "Assigned Cases", assigned),
        _card("solved_cases", "fa-check-circle", "Solved Cases", solved),
        _card("total_revenue", "fa-money-bill-wave", "Total Revenue", format_inr(revenue)),
        _card("pending_amount", "fa-money-bill-wave", "Pending Amount", format_inr(pending)),
        _card("pending_cases", "fa-clock", "Pending Cases", in_progress),
    ]

    recent = (
        db.query(Customer)
        .filter(Customer.assigned_to == officer_id)
        .order_by(Customer.assigned_date.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    recent_cases = [
        AgentRecentCase(
            id=c.id,
            case_id=c.case_id,
            customer=c.name,
            problem=c.problem,
            assigned_date=c.assigned_date,
            status=c.status,
            days_count=whole_days_since(c.assigned_date or c.created_at),
        )
        for c in recent
    ]
    return AgentStats(stats=stats, recent_cases=recent_cases)


# =============================================================================
# Marketing dashboard
# =============================================================================

VISIT_CARDS = [
    ("bank", "fa-university", "Bank Manager Visit"),
    ("nbfc", "fa-landmark", "NBFC Manager Visit"),
    ("car_showroom", "fa-car", "Car Showroom Visit"),
    ("bike_showroom", "fa-motorcycle", "Bike Showroom Visit"),
    ("other_manager", "fa-user-tie", "Other Manager Visit"),
    ("other_customer", "fa-users", "Other Customer Visit"),
]


def _visit_cards(visits: list[FieldData]) -> list[StatCard]:
    counts = {category: 0 for category, _, _ in VISIT_CARDS}
    for visit in visits:
        counts[field_data_service.categorize_visit(visit)] += 1
    return [
        _card(f"{category}_visits", icon, label, counts[category])
        for category, icon, label in VISIT_CARDS
    ]


def _visit_item(visit: FieldData) -> VisitItem:
    return VisitItem(
        id=visit.id,
        date=local_date_string(visit.created_at),
        bank=visit.bank_name or "-",
        manager=visit.manager_name or "-",
        contact=visit.manager_phone or "-",
        area=visit.bank_area or "-",
        manager_type=visit.manager_type or "-",
    )


def get_marketing_stats(db: Session, marketing_id: UUID) -> MarketingStats:
    """Visit, expense and lead numbers for one marketing user, plus today's attendance."""
    visits = field_data_service.list_field_data(db, created_by=marketing_id)
    since = month_start()
    monthly_visits = (
        db.query(func.count(FieldData.id))
        .filter(FieldData.created_by == marketing_id, FieldData.created_at >= since)
        .scalar()
        or 0
    )
    expenses = expense_service.total_amount(db, user_id=marketing_id)
    new_leads = (
        db.query(func.count(Followup.id))
        .filter(
            Followup.created_by == marketing_id,
            Followup.status == FollowupStatus.PENDING.value,
        )
        .scalar()
        or 0
    )

    stats = _visit_cards(visits) + [
        _card("monthly_visits", "fa-calendar-check", "Total Monthly Visit", monthly_visits),
        _card("total_expenses", "fa-rupee-sign", "Total Expenses", format_inr(expenses)),
        _card("new_leads", "fa-handshake", "New Leads", new_leads),
    ]

    attendance = attendance_service.today_for_user(db, marketing_id)
    return MarketingStats(
        stats=stats,
        visits=[_visit_item(v) for v in visits[:RECENT_LIMIT]],
        attendance=TodayAttendance(
            login_time=attendance.login_time if attendance else None,
            logout_time=attendance.logout_time if attendance else None,
        ),
    )


def get_marketing_overview(db: Session) -> MarketingOverview:
    """Organisation-wide visit categories, expenses, leads and team sizes."""
    visits = field_data_service.list_field_data(db)
    since = month_start()
    monthly_visits = (
        db.query(func.count(FieldData.id)).filter(FieldData.created_at >= since).scalar() or 0
    )
    expenses = _sum(db, Expense.amount)
    total_leads = db.query(func.count(Followup.id)).scalar() or 0

    top_stats = _visit_cards(visits) + [
        _card("monthly_visits", "fa-calendar-check", "Total Monthly Visit", monthly_visits),
        _card("total_expenses", "fa-rupee-sign", "Total Expenses", format_inr(expenses)),
        _card("new_leads", "fa-handshake", "New Leads", total_leads),
    ]

    roles = user_service.count_by_role(db)
    bottom_stats = [
        _card("marketing_users", "fa-user-tie", "Marketing Users", roles.get(Role.MARKETING.value, 0)),
        _card("agents", "fa-users", "Agents", roles.get(Role.AGENT.value, 0)),
        _card("telecallers", "fa-phone", "Telecallers", roles.get(Role.TELECALLER.value, 0)),
    ]
    return MarketingOverview(
        top_stats=top_stats,
        bottom_stats=bottom_stats,
        recent_visits=[_visit_item(v) for v in visits[:RECENT_LIMIT]],
    )
