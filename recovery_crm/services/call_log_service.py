"""Call log service - append-only call records."""

from sqlalchemy import or_
from sqlalchemy.orm import Session

from recovery_crm.db.models import CallLog
from recovery_crm.schemas.call_log import CallLogCreate
from recovery_crm.utils.normalization import escape_like_string, normalize_search_text
from recovery_crm.utils.pagination import PaginationParams, paginate_query


def list_call_logs(
    db: Session,
    pagination: PaginationParams,
    search: str | None = None,
) -> tuple[list[CallLog], int]:
    """Newest first; search matches customer, phone or status."""
    query = db.query(CallLog)
    term = normalize_search_text(search)
    if term:
        pattern = f"%{escape_like_string(term)}%"
        query = query.filter(
            or_(
                CallLog.customer.ilike(pattern, escape="\\"),
                CallLog.phone.ilike(pattern, escape="\\"),
                CallLog.status.ilike(pattern, escape="\\"),
            )
        )
    query = query.order_by(CallLog.created_at.desc())
    return paginate_query(query, pagination)


def create_call_log(db: Session, data: CallLogCreate) -> CallLog:
    log = CallLog(
        time=data.time,
        customer=data.customer.strip(),
        phone=data.phone.strip(),
        duration=data.duration,
        status=data.status.value,
        response=data.response,
        callback_time=data.callback_time,
        created_by=data.created_by,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log
