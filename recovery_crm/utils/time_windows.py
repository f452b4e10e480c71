"""Day/week/month windows in the business timezone, returned as UTC bounds.

Timestamps are stored in UTC. Dashboards count "today" and "this month"
the way the office sees them, so windows start at local midnight and are
converted back to UTC before they reach a query.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from recovery_crm.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def business_tz() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def today_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """[local midnight, next local midnight) for the current business day, in UTC."""
    local_now = (now or utcnow()).astimezone(business_tz())
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def month_start(now: datetime | None = None) -> datetime:
    """First local midnight of the current business month, in UTC."""
    local_now = (now or utcnow()).astimezone(business_tz())
    start = local_now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start.astimezone(timezone.utc)


def days_ago(days: int, now: datetime | None = None) -> datetime:
    return (now or utcnow()) - timedelta(days=days)


def local_date_string(now: datetime | None = None) -> str:
    """Business-local calendar date as YYYY-MM-DD."""
    return as_utc(now or utcnow()).astimezone(business_tz()).date().isoformat()


def whole_days_since(value: datetime, now: datetime | None = None) -> int:
    return max(0, ((now or utcnow()) - as_utc(value)).days)
